"""Object storage providers (local disk and S3-compatible).

Objects are addressed by (bucket, path). Paths are relative, use forward
slashes and may not climb out of their bucket.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import timedelta
from functools import lru_cache
from pathlib import Path, PurePosixPath

import boto3
import jwt
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from ...config import settings
from ...core.exceptions import (
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from ...core.logging import get_logger
from ...core.utils import utc_now

logger = get_logger(__name__)

DOWNLOAD_TOKEN_AUDIENCE = "storage-download"


def normalize_object_path(path: str) -> str:
    """Validate a client-supplied object path and return it normalized."""
    if not path or not path.strip():
        raise ValidationError("File path is required", field="filePath")
    candidate = PurePosixPath(path.strip().replace("\\", "/"))
    if candidate.is_absolute() or ".." in candidate.parts:
        raise ValidationError("Invalid file path", field="filePath", value=path)
    return str(candidate)


class StorageProvider(ABC):
    """Abstract interface for storage providers."""

    @abstractmethod
    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str | None = None,
        upsert: bool = True,
    ) -> str:
        """Store an object and return its normalized path."""

    @abstractmethod
    async def signed_url(self, bucket: str, path: str, ttl_seconds: int) -> str:
        """A time-limited download URL."""

    @abstractmethod
    async def remove(self, bucket: str, path: str) -> None:
        """Delete an object; missing objects are ignored."""


class LocalStorageProvider(StorageProvider):
    """Stores objects under ``root/<bucket>/<path>``, served at ``base_url``.

    Public buckets get plain URLs. Objects in any other bucket are only
    served with a short-lived token bound to that object.
    """

    def __init__(
        self,
        root: str | Path,
        base_url: str,
        public_buckets: Iterable[str] | None = None,
        signing_key: str | None = None,
    ):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.public_buckets = frozenset(
            settings.public_buckets if public_buckets is None else public_buckets
        )
        self.signing_key = signing_key or settings.jwt_secret_key

    def _file_for(self, bucket: str, path: str) -> Path:
        return self.root / normalize_object_path(bucket) / normalize_object_path(path)

    async def upload(self, bucket, path, data, content_type=None, upsert=True) -> str:
        target = self._file_for(bucket, path)
        if target.exists() and not upsert:
            raise ConflictError(f"Object '{path}' already exists in '{bucket}'")
        target.parent.mkdir(parents=True, exist_ok=True)
        await run_in_threadpool(target.write_bytes, data)
        return normalize_object_path(path)

    async def signed_url(self, bucket, path, ttl_seconds) -> str:
        key = normalize_object_path(path)
        url = f"{self.base_url}/{bucket}/{key}"
        if bucket in self.public_buckets:
            return url
        token = jwt.encode(
            {
                "sub": f"{bucket}/{key}",
                "aud": DOWNLOAD_TOKEN_AUDIENCE,
                "exp": utc_now() + timedelta(seconds=ttl_seconds),
            },
            self.signing_key,
            algorithm="HS256",
        )
        return f"{url}?token={token}"

    def resolve(self, bucket: str, path: str, token: str | None = None) -> Path:
        """The file behind a served URL.

        Raises:
            AuthenticationError: If a private object is requested without a
                valid token for exactly that object
            NotFoundError: If no such file is stored
        """
        key = normalize_object_path(path)
        if bucket not in self.public_buckets:
            if not token:
                raise AuthenticationError("A signed download link is required")
            try:
                claims = jwt.decode(
                    token,
                    self.signing_key,
                    algorithms=["HS256"],
                    audience=DOWNLOAD_TOKEN_AUDIENCE,
                )
            except jwt.InvalidTokenError as e:
                raise AuthenticationError("Invalid or expired download link") from e
            if claims.get("sub") != f"{bucket}/{key}":
                raise AuthenticationError("Invalid or expired download link")

        target = self._file_for(bucket, key)
        if not target.is_file():
            raise NotFoundError("File not found")
        return target

    async def remove(self, bucket, path) -> None:
        self._file_for(bucket, path).unlink(missing_ok=True)


class S3StorageProvider(StorageProvider):
    """S3-compatible storage; each bucket name maps to an S3 bucket."""

    def __init__(
        self,
        endpoint_url: str | None,
        access_key_id: str | None,
        secret_access_key: str | None,
        region: str,
    ):
        self.client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region,
            config=Config(signature_version="s3v4", retries={"max_attempts": 3}),
        )

    async def upload(self, bucket, path, data, content_type=None, upsert=True) -> str:
        key = normalize_object_path(path)
        params = {"Bucket": bucket, "Key": key, "Body": data}
        if content_type:
            params["ContentType"] = content_type
        if not upsert:
            params["IfNoneMatch"] = "*"
        try:
            await run_in_threadpool(lambda: self.client.put_object(**params))
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code == "PreconditionFailed":
                raise ConflictError(f"Object '{key}' already exists in '{bucket}'")
            logger.error(f"S3 upload of {bucket}/{key} failed: {e}")
            raise ExternalServiceError("object storage", "upload") from e
        except BotoCoreError as e:
            logger.error(f"S3 upload of {bucket}/{key} failed: {e}")
            raise ExternalServiceError("object storage", "upload") from e
        return key

    async def signed_url(self, bucket, path, ttl_seconds) -> str:
        try:
            return await run_in_threadpool(
                lambda: self.client.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": bucket, "Key": normalize_object_path(path)},
                    ExpiresIn=ttl_seconds,
                )
            )
        except (ClientError, BotoCoreError) as e:
            raise ExternalServiceError("object storage", "sign url") from e

    async def remove(self, bucket, path) -> None:
        try:
            await run_in_threadpool(
                lambda: self.client.delete_object(
                    Bucket=bucket, Key=normalize_object_path(path)
                )
            )
        except (ClientError, BotoCoreError) as e:
            raise ExternalServiceError("object storage", "delete") from e


def build_storage(provider: str | None = None) -> StorageProvider:
    provider = (provider or settings.storage_provider).lower()
    if provider == "s3":
        return S3StorageProvider(
            endpoint_url=settings.storage_s3_endpoint_url,
            access_key_id=settings.storage_s3_access_key_id,
            secret_access_key=settings.storage_s3_secret_access_key,
            region=settings.storage_s3_region,
        )
    if provider == "local":
        return LocalStorageProvider(
            settings.storage_local_root, settings.storage_public_base_url
        )
    raise ValueError(f"Unknown storage provider: {provider}")


@lru_cache
def get_storage() -> StorageProvider:
    """Dependency returning the configured storage provider."""
    return build_storage()
