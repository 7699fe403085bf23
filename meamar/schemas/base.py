from typing import Generic, List, TypeVar
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")

class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON (what the web client sends and reads)"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class Page(CamelModel, Generic[T]):
    items: List[T]
    total: int
    limit: int
    offset: int
