import enum
import uuid
from datetime import datetime, timezone
from typing import Type
from sqlalchemy import JSON, Enum
from sqlalchemy.dialects.postgresql import JSONB

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")

def generate_id() -> str:
    return str(uuid.uuid4())

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def enum_type(enum_cls: Type[enum.Enum], name: str) -> Enum:
    """Enum column stored by value, e.g. 'pending' rather than 'PENDING'"""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
    )
