"""S3 object storage for profile images."""

from typing import Any, Optional

import aioboto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import ObjectStorageError

logger = structlog.get_logger()


class S3ObjectStorage:
    """IObjectStorage backed by a single S3 bucket.

    Built once at startup and injected into the services that need it.
    """

    def __init__(
        self,
        bucket: str,
        region: str,
        session: Optional[aioboto3.Session] = None,
    ) -> None:
        self._bucket = bucket
        self._session = session or aioboto3.Session(region_name=region)
        self._config = Config(
            region_name=region,
            signature_version="s3v4",
            retries={"max_attempts": 3, "mode": "adaptive"},
        )

    async def presign_upload(self, key: str, content_type: str, expires_in: int) -> str:
        """Generate a pre-signed public-read PUT URL for ``key``."""
        params: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": key,
            "ContentType": content_type,
            "ACL": "public-read",
        }
        try:
            async with self._session.client("s3", config=self._config) as s3_client:
                url: str = await s3_client.generate_presigned_url(
                    "put_object",
                    Params=params,
                    ExpiresIn=expires_in,
                )
        except (BotoCoreError, ClientError) as exc:
            logger.error("s3_presign_failed", key=key, error=str(exc))
            raise ObjectStorageError("upload presign", key) from exc

        logger.debug("s3_presigned_upload", key=key, expires_in=expires_in)
        return url

    async def delete(self, key: str) -> None:
        """Delete ``key`` from the bucket."""
        try:
            async with self._session.client("s3", config=self._config) as s3_client:
                await s3_client.delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error("s3_delete_failed", key=key, error=str(exc))
            raise ObjectStorageError("delete", key) from exc

        logger.info("s3_object_deleted", key=key)
