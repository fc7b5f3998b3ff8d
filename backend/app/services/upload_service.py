"""
UploadService — image storage on an S3-compatible bucket.

Objects are stored under ``{folder}/{uuid}.{ext}`` and exposed through
``S3_PUBLIC_URL``. boto3 is blocking; async callers run these methods in a
worker thread.
"""
from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import uuid4

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.services.errors import ServiceError, ValidationError

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


class StorageNotConfiguredError(ServiceError):
    """S3 credentials or bucket missing from settings."""

    def __init__(self, detail: str = "Armazenamento de arquivos não configurado") -> None:
        super().__init__(detail, code="storage_not_configured")


class StorageError(ServiceError):
    """Error talking to the bucket."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail, code="storage_error")


def validate_image(
    content_type: Optional[str],
    size_bytes: int,
    *,
    max_size_mb: int = settings.MAX_IMAGE_SIZE_MB,
    allow_any_image: bool = False,
) -> None:
    """
    Check an uploaded image against the type allow-list and a size cap.

    Raises:
        ValidationError: ``invalid_file_type``, ``file_too_large`` or
            ``file_required``.
    """
    if size_bytes <= 0:
        raise ValidationError("Arquivo é obrigatório", code="file_required")

    content_type = (content_type or "").lower()
    if allow_any_image:
        allowed = content_type.startswith("image/")
    else:
        allowed = content_type in settings.allowed_image_types_list
    if not allowed:
        raise ValidationError(
            "Tipo de arquivo inválido. Envie uma imagem (jpeg, png, gif ou webp)",
            code="invalid_file_type",
        )

    if size_bytes > max_size_mb * BYTES_PER_MB:
        raise ValidationError(
            f"Arquivo excede o limite de {max_size_mb} MB",
            code="file_too_large",
        )


class UploadService:
    """boto3 S3 client bound to one bucket."""

    def __init__(
        self,
        *,
        endpoint: str,
        access_key_id: str,
        secret_access_key: str,
        bucket: str,
        public_url: str,
        region: str = "auto",
        client: Any = None,
    ) -> None:
        self._bucket = bucket
        self._public_url = public_url.rstrip("/")
        self._client = client or boto3.client(
            "s3",
            endpoint_url=endpoint,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            config=BotoConfig(
                signature_version="s3v4",
                retries={"max_attempts": 2, "mode": "standard"},
            ),
            region_name=region,
        )

    @classmethod
    def from_settings(cls) -> UploadService:
        """
        Build the service from application settings.

        Raises:
            StorageNotConfiguredError: any S3 setting is empty.
        """
        required = [
            settings.S3_ENDPOINT,
            settings.S3_PUBLIC_URL,
            settings.S3_ACCESS_KEY_ID,
            settings.S3_SECRET_ACCESS_KEY,
            settings.S3_BUCKET,
        ]
        if not all(required):
            raise StorageNotConfiguredError()
        return cls(
            endpoint=settings.S3_ENDPOINT,
            access_key_id=settings.S3_ACCESS_KEY_ID,
            secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            bucket=settings.S3_BUCKET,
            public_url=settings.S3_PUBLIC_URL,
            region=settings.S3_REGION,
        )

    @staticmethod
    def generate_object_key(filename: str, folder: str = "uploads") -> str:
        extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        return f"{folder.strip('/')}/{uuid4()}.{extension}"

    def public_url_for(self, object_key: str) -> str:
        return f"{self._public_url}/{object_key}"

    def key_from_url(self, url: str) -> str:
        """
        Resolve the object key of a public (or bucket-path) URL.

        Raises:
            ValidationError: URL does not point into this bucket.
        """
        prefix = f"{self._public_url}/"
        if url.startswith(prefix):
            key = url[len(prefix):]
        else:
            key = url.split(f"{self._bucket}/", 1)[1] if f"{self._bucket}/" in url else ""
        if not key:
            raise ValidationError("URL de arquivo inválida", code="invalid_file_url")
        return key

    def upload_file(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        folder: str = "uploads",
    ) -> str:
        """
        Upload bytes and return the public URL.

        Raises:
            StorageError: boto3 failure.
        """
        object_key = self.generate_object_key(filename, folder)
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=object_key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception("Falha no upload de %s", object_key)
            raise StorageError(f"Falha ao enviar arquivo: {e}") from e
        logger.info("Arquivo enviado: %s (%d bytes)", object_key, len(data))
        return self.public_url_for(object_key)

    def delete_file(self, url: str) -> None:
        object_key = self.key_from_url(url)
        try:
            self._client.delete_object(Bucket=self._bucket, Key=object_key)
        except (BotoCoreError, ClientError) as e:
            logger.exception("Falha ao remover %s", object_key)
            raise StorageError(f"Falha ao remover arquivo: {e}") from e
        logger.info("Arquivo removido: %s", object_key)

    def check_bucket(self) -> None:
        """Raise StorageError unless the bucket answers a HEAD request."""
        try:
            self._client.head_bucket(Bucket=self._bucket)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Bucket indisponível: {e}") from e
