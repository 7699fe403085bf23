import json
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from meamar.api import deps
from meamar.core.object_storage import (
    ObjectAclPolicy,
    ObjectNotFoundError,
    ObjectPermission,
    ObjectStorageService,
    StoredObject,
)
from meamar.main import app
from tests.helpers import auth_headers


@pytest.fixture
def storage():
    """A real service whose boto3 client is replaced by a mock"""
    service = ObjectStorageService(bucket="meamar-test", region="me-central-1")
    service.client = MagicMock()
    app.dependency_overrides[deps.get_object_storage] = lambda: service
    return service


def _not_found():
    return ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")


def test_presigned_upload_url_points_into_private_dir():
    service = ObjectStorageService(bucket="meamar-test", region="me-central-1")
    url = service.get_upload_url()
    assert "meamar-test" in url
    assert "/.private/uploads/" in url
    assert "X-Amz-Signature=" in url


@pytest.mark.parametrize(
    "raw,expected",
    [
        (
            "https://meamar-test.s3.me-central-1.amazonaws.com/.private/uploads/abc?X-Amz-Signature=x",
            "/objects/uploads/abc",
        ),
        ("https://s3.me-central-1.amazonaws.com/meamar-test/.private/uploads/abc", "/objects/uploads/abc"),
        ("/objects/uploads/abc", "/objects/uploads/abc"),
        ("https://cdn.example.com/logo.png", "https://cdn.example.com/logo.png"),
    ],
)
def test_normalize_object_path(raw, expected):
    service = ObjectStorageService(bucket="meamar-test", region="me-central-1")
    assert service.normalize_object_path(raw) == expected


def test_can_access():
    service = ObjectStorageService(bucket="meamar-test", region="me-central-1")
    public = StoredObject("k", "image/png", 1, ObjectAclPolicy(owner="u1", visibility="public"))
    private = StoredObject("k", "image/png", 1, ObjectAclPolicy(owner="u1", visibility="private"))
    unowned = StoredObject("k", "image/png", 1, None)

    assert service.can_access(public, "someone")
    assert not service.can_access(public, "someone", ObjectPermission.WRITE)
    assert service.can_access(private, "u1")
    assert not service.can_access(private, "someone")
    assert not service.can_access(unowned, "u1")


def test_upload_url_endpoint(client, storage, buyer_headers):
    storage.client.generate_presigned_url.return_value = "https://signed.example/put"

    assert client.post("/api/objects/upload").status_code == 401
    response = client.post("/api/objects/upload", headers=buyer_headers)
    assert response.status_code == 200
    assert response.json() == {"uploadURL": "https://signed.example/put"}


def test_logo_acl_is_public_and_owned_by_caller(client, storage, vendor_headers):
    storage.client.head_object.return_value = {"ContentType": "image/png", "ContentLength": 10, "Metadata": {}}

    response = client.put(
        "/api/upload/logo",
        json={"logoUrl": "https://meamar-test.s3.me-central-1.amazonaws.com/.private/uploads/logo-1?sig=1"},
        headers=vendor_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"objectPath": "/objects/uploads/logo-1"}

    kwargs = storage.client.copy_object.call_args.kwargs
    assert kwargs["Key"] == ".private/uploads/logo-1"
    assert kwargs["MetadataDirective"] == "REPLACE"
    assert json.loads(kwargs["Metadata"]["acl-policy"]) == {"owner": "vendor-1", "visibility": "public"}


def test_logo_for_missing_object(client, storage, vendor_headers):
    storage.client.head_object.side_effect = _not_found()
    response = client.put("/api/upload/logo", json={"logoUrl": "/objects/uploads/gone"}, headers=vendor_headers)
    assert response.status_code == 404


def test_download_requires_auth(client, storage):
    assert client.get("/objects/uploads/logo-1").status_code == 401


def test_download_missing_object(client, storage, buyer_headers):
    storage.client.head_object.side_effect = _not_found()
    assert client.get("/objects/uploads/nope", headers=buyer_headers).status_code == 404


def test_download_private_object_of_someone_else(client, storage):
    storage.client.head_object.return_value = {
        "ContentType": "application/pdf",
        "ContentLength": 3,
        "Metadata": {"acl-policy": json.dumps({"owner": "vendor-1", "visibility": "private"})},
    }
    response = client.get("/objects/uploads/contract.pdf", headers=auth_headers("buyer-1"))
    assert response.status_code == 403


def test_download_streams_public_object(client, storage, buyer_headers):
    storage.client.head_object.return_value = {
        "ContentType": "image/png",
        "ContentLength": 6,
        "Metadata": {"acl-policy": json.dumps({"owner": "vendor-1", "visibility": "public"})},
    }
    body = MagicMock()
    body.iter_chunks.return_value = iter([b"png", b"png"])
    storage.client.get_object.return_value = {"Body": body}

    response = client.get("/objects/uploads/logo-1", headers=buyer_headers)
    assert response.status_code == 200
    assert response.content == b"pngpng"
    assert response.headers["content-type"] == "image/png"
    storage.client.head_object.assert_called_with(Bucket="meamar-test", Key=".private/uploads/logo-1")


def test_get_object_rejects_paths_outside_objects():
    service = ObjectStorageService(bucket="meamar-test", region="me-central-1")
    with pytest.raises(ObjectNotFoundError):
        service.get_object("/etc/passwd")
