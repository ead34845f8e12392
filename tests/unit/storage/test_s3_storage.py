"""Unit tests for S3ObjectStorage with a mocked aioboto3 session."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from botocore.exceptions import ClientError

from core.exceptions import ErrorCode, ObjectStorageError
from infrastructure.storage.s3_storage import S3ObjectStorage


def _session(s3_client: AsyncMock) -> MagicMock:
    """Session whose client() works as an async context manager yielding ``s3_client``."""
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=s3_client)
    context.__aexit__ = AsyncMock(return_value=False)
    session = MagicMock()
    session.client.return_value = context
    return session


def _client_error(operation: str) -> ClientError:
    return ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, operation)


@pytest.fixture
def s3_client() -> AsyncMock:
    client = AsyncMock()
    client.generate_presigned_url.return_value = "https://bucket.s3.amazonaws.com/kc.jpeg?sig"
    return client


@pytest.fixture
def storage(s3_client: AsyncMock) -> S3ObjectStorage:
    return S3ObjectStorage(bucket="profile-images", region="us-east-1", session=_session(s3_client))


class TestPresignUpload:
    @pytest.mark.asyncio
    async def test_presigns_public_read_put(self, storage: S3ObjectStorage, s3_client: AsyncMock):
        url = await storage.presign_upload("kc.jpeg", "image/jpeg", 300)

        assert url == "https://bucket.s3.amazonaws.com/kc.jpeg?sig"
        s3_client.generate_presigned_url.assert_called_once_with(
            "put_object",
            Params={
                "Bucket": "profile-images",
                "Key": "kc.jpeg",
                "ContentType": "image/jpeg",
                "ACL": "public-read",
            },
            ExpiresIn=300,
        )

    @pytest.mark.asyncio
    async def test_wraps_client_errors(self, storage: S3ObjectStorage, s3_client: AsyncMock):
        s3_client.generate_presigned_url.side_effect = _client_error("PutObject")

        with pytest.raises(ObjectStorageError) as exc_info:
            await storage.presign_upload("kc.jpeg", "image/jpeg", 300)

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == ErrorCode.OBJECT_STORAGE_ERROR


class TestDelete:
    @pytest.mark.asyncio
    async def test_deletes_key(self, storage: S3ObjectStorage, s3_client: AsyncMock):
        await storage.delete("kc.jpeg")

        s3_client.delete_object.assert_called_once_with(Bucket="profile-images", Key="kc.jpeg")

    @pytest.mark.asyncio
    async def test_wraps_client_errors(self, storage: S3ObjectStorage, s3_client: AsyncMock):
        s3_client.delete_object.side_effect = _client_error("DeleteObject")

        with pytest.raises(ObjectStorageError) as exc_info:
            await storage.delete("kc.jpeg")

        assert exc_info.value.details == {"key": "kc.jpeg"}
