import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from botocore.exceptions import BotoCoreError, ClientError

from meamar.api import deps
from meamar.core.object_storage import (
    ObjectAclPolicy,
    ObjectNotFoundError,
    ObjectPermission,
    ObjectStorageService,
)
from meamar.schemas.upload import LogoAcl, ObjectPath, UploadUrl

logger = logging.getLogger(__name__)

router = APIRouter()

# Served outside the /api prefix, like the upload URLs the client stores
objects_router = APIRouter()

OBJECT_NOT_FOUND = "Object not found"
ACCESS_DENIED = "Forbidden"
STORAGE_UNAVAILABLE = "Object storage unavailable"

@router.post("/objects/upload", response_model=UploadUrl)
def create_upload_url(
    auth: deps.AuthContext = Depends(deps.require_auth),
    storage: ObjectStorageService = Depends(deps.get_object_storage),
):
    """
    Presigned URL the browser PUTs the file to
    """
    try:
        upload_url = storage.get_upload_url()
    except (BotoCoreError, ClientError):
        logger.exception("Could not presign upload URL")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=STORAGE_UNAVAILABLE)
    return UploadUrl(upload_url=upload_url)

@router.put("/upload/logo", response_model=ObjectPath)
def publish_logo(
    logo_in: LogoAcl,
    auth: deps.AuthContext = Depends(deps.require_auth),
    storage: ObjectStorageService = Depends(deps.get_object_storage),
):
    """
    Make an uploaded logo publicly readable, owned by the caller
    """
    try:
        object_path = storage.set_acl_policy(
            logo_in.logo_url,
            ObjectAclPolicy(owner=auth.user_id, visibility="public"),
        )
    except ObjectNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=OBJECT_NOT_FOUND)
    except (BotoCoreError, ClientError):
        logger.exception("Could not set object ACL")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=STORAGE_UNAVAILABLE)
    return ObjectPath(object_path=object_path)

@objects_router.get("/objects/{object_path:path}")
def download_object(
    object_path: str,
    auth: deps.AuthContext = Depends(deps.require_auth),
    storage: ObjectStorageService = Depends(deps.get_object_storage),
):
    try:
        stored = storage.get_object(f"/objects/{object_path}")
    except ObjectNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=OBJECT_NOT_FOUND)
    except (BotoCoreError, ClientError):
        logger.exception("Could not read object metadata")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=STORAGE_UNAVAILABLE)

    if not storage.can_access(stored, auth.user_id, ObjectPermission.READ):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=ACCESS_DENIED)

    visibility = stored.acl_policy.visibility if stored.acl_policy else "private"
    return StreamingResponse(
        storage.open_stream(stored),
        media_type=stored.content_type,
        headers={
            "Content-Length": str(stored.size),
            "Cache-Control": f"{visibility}, max-age=3600",
        },
    )
