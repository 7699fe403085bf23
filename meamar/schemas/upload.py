from pydantic import Field
from meamar.schemas.base import CamelModel

class UploadUrl(CamelModel):
    upload_url: str = Field(alias="uploadURL")

class LogoAcl(CamelModel):
    logo_url: str = Field(min_length=1)

class ObjectPath(CamelModel):
    object_path: str
