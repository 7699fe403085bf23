"""Object storage for uploaded files (vendor logos, product images, attachments).

Files are uploaded by the browser straight to the bucket with a presigned
URL. The API only hands out those URLs, attaches an ACL policy to the
uploaded object (stored in the object's metadata) and serves ACL-checked
downloads under ``/objects/<path>``.
"""

import json
import logging
import uuid
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Iterator, Optional
from urllib.parse import urlparse

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from meamar.core.config import settings

logger = logging.getLogger(__name__)

ACL_METADATA_KEY = "acl-policy"
OBJECTS_PREFIX = "/objects/"

class ObjectNotFoundError(Exception):
    pass

class ObjectPermission(str, Enum):
    READ = "read"
    WRITE = "write"

@dataclass(frozen=True)
class ObjectAclPolicy:
    owner: str
    visibility: str  # "public" or "private"

@dataclass
class StoredObject:
    key: str
    content_type: str
    size: int
    acl_policy: Optional[ObjectAclPolicy]

class ObjectStorageService:
    def __init__(
        self,
        bucket: Optional[str] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ):
        self.bucket = bucket or settings.OBJECT_STORAGE_BUCKET
        self.region = region or settings.OBJECT_STORAGE_REGION
        self.endpoint_url = endpoint_url or settings.OBJECT_STORAGE_ENDPOINT_URL
        self.private_dir = settings.PRIVATE_OBJECT_DIR.strip("/")

        config = Config(
            region_name=self.region,
            signature_version="s3v4",
            retries={"max_attempts": 3, "mode": "standard"},
            connect_timeout=10,
            read_timeout=60,
        )
        self.client = boto3.client("s3", config=config, endpoint_url=self.endpoint_url)

        logger.info(f"ObjectStorageService initialized: region={self.region}, bucket={self.bucket}")

    def get_upload_url(self) -> str:
        """Presigned PUT URL for a fresh object under the private upload directory"""
        key = f"{self.private_dir}/uploads/{uuid.uuid4()}"
        return self.client.generate_presigned_url(
            ClientMethod="put_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=settings.UPLOAD_URL_TTL_SECONDS,
        )

    def normalize_object_path(self, raw_path: str) -> str:
        """Map a bucket URL (e.g. the presigned upload URL) to its /objects/ path.

        Anything that does not point into our private directory is returned unchanged.
        """
        if raw_path.startswith(OBJECTS_PREFIX):
            return raw_path

        parsed = urlparse(raw_path)
        if not parsed.scheme:
            return raw_path

        key = parsed.path.lstrip("/")
        # path-style URLs carry the bucket as the first segment
        if key.startswith(f"{self.bucket}/"):
            key = key[len(self.bucket) + 1:]

        if not key.startswith(f"{self.private_dir}/"):
            return raw_path
        return OBJECTS_PREFIX + key[len(self.private_dir) + 1:]

    def _key_for(self, object_path: str) -> str:
        if not object_path.startswith(OBJECTS_PREFIX):
            raise ObjectNotFoundError(object_path)
        entity_id = object_path[len(OBJECTS_PREFIX):]
        if not entity_id:
            raise ObjectNotFoundError(object_path)
        return f"{self.private_dir}/{entity_id}"

    def get_object(self, object_path: str) -> StoredObject:
        """
        Raises:
            ObjectNotFoundError: If no object exists at object_path
            ClientError: If S3 fails for any other reason
        """
        key = self._key_for(object_path)
        try:
            head = self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                raise ObjectNotFoundError(object_path) from e
            raise

        return StoredObject(
            key=key,
            content_type=head.get("ContentType") or "application/octet-stream",
            size=head.get("ContentLength", 0),
            acl_policy=_parse_acl(head.get("Metadata", {})),
        )

    def set_acl_policy(self, raw_path: str, policy: ObjectAclPolicy) -> str:
        """Attach policy to an uploaded object and return its /objects/ path"""
        object_path = self.normalize_object_path(raw_path)
        if not object_path.startswith(OBJECTS_PREFIX):
            return object_path

        stored = self.get_object(object_path)
        # S3 metadata can only be replaced by copying the object onto itself
        self.client.copy_object(
            Bucket=self.bucket,
            Key=stored.key,
            CopySource={"Bucket": self.bucket, "Key": stored.key},
            Metadata={ACL_METADATA_KEY: json.dumps(asdict(policy))},
            MetadataDirective="REPLACE",
            ContentType=stored.content_type,
        )
        logger.info(
            "Object ACL set",
            extra={"event": "object.acl_set", "object_path": object_path, "visibility": policy.visibility},
        )
        return object_path

    def can_access(
        self,
        stored: StoredObject,
        user_id: Optional[str],
        permission: ObjectPermission = ObjectPermission.READ,
    ) -> bool:
        policy = stored.acl_policy
        if policy is None:
            return False
        if policy.visibility == "public" and permission == ObjectPermission.READ:
            return True
        return user_id is not None and policy.owner == user_id

    def open_stream(self, stored: StoredObject, chunk_size: int = 64 * 1024) -> Iterator[bytes]:
        response = self.client.get_object(Bucket=self.bucket, Key=stored.key)
        yield from response["Body"].iter_chunks(chunk_size=chunk_size)

def _parse_acl(metadata: Dict[str, str]) -> Optional[ObjectAclPolicy]:
    raw = metadata.get(ACL_METADATA_KEY)
    if not raw:
        return None
    try:
        data = json.loads(raw)
        return ObjectAclPolicy(owner=data["owner"], visibility=data["visibility"])
    except (ValueError, KeyError, TypeError):
        logger.warning("Ignoring malformed ACL metadata", extra={"metadata": raw})
        return None
