"""
UploadService and upload endpoint tests with a mocked S3 client.
"""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from httpx import AsyncClient

from app.api.v1.endpoints.uploads import get_upload_service
from app.main import app
from app.services.errors import ValidationError
from app.services.upload_service import (
    StorageError,
    StorageNotConfiguredError,
    UploadService,
    validate_image,
)

PUBLIC_URL = "https://cdn.example.com"


def _service(client: MagicMock) -> UploadService:
    return UploadService(
        endpoint="https://s3.example.com",
        access_key_id="key",
        secret_access_key="secret",
        bucket="comanda",
        public_url=f"{PUBLIC_URL}/",
        client=client,
    )


# ---------------------------------------------------------------------------
# validate_image
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("content_type", "size", "kwargs", "code"),
    [
        ("image/png", 0, {}, "file_required"),
        ("application/pdf", 10, {}, "invalid_file_type"),
        ("image/svg+xml", 10, {}, "invalid_file_type"),
        ("image/jpeg", 6 * 1024 * 1024, {"max_size_mb": 5}, "file_too_large"),
        ("image/png", 3 * 1024 * 1024, {"max_size_mb": 2, "allow_any_image": True}, "file_too_large"),
    ],
)
def test_validate_image_rejects(content_type: str, size: int, kwargs: dict, code: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_image(content_type, size, **kwargs)

    assert exc_info.value.code == code


def test_validate_image_accepts_any_image_when_allowed() -> None:
    validate_image("image/svg+xml", 1024, allow_any_image=True)
    validate_image("IMAGE/PNG", 1024)


# ---------------------------------------------------------------------------
# UploadService
# ---------------------------------------------------------------------------

def test_upload_file_puts_object_under_folder() -> None:
    s3 = MagicMock()

    url = _service(s3).upload_file(b"png-bytes", "Foto.PNG", "image/png", folder="products")

    kwargs = s3.put_object.call_args.kwargs
    assert kwargs["Bucket"] == "comanda"
    assert kwargs["Key"].startswith("products/")
    assert kwargs["Key"].endswith(".png")
    assert kwargs["ContentType"] == "image/png"
    assert url == f"{PUBLIC_URL}/{kwargs['Key']}"


def test_upload_file_wraps_client_errors() -> None:
    s3 = MagicMock()
    s3.put_object.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}},
        "PutObject",
    )

    with pytest.raises(StorageError) as exc_info:
        _service(s3).upload_file(b"data", "a.jpg", "image/jpeg")

    assert exc_info.value.code == "storage_error"


def test_delete_file_resolves_key_from_public_url() -> None:
    s3 = MagicMock()
    service = _service(s3)

    service.delete_file(f"{PUBLIC_URL}/categories/abc.webp")

    s3.delete_object.assert_called_once_with(Bucket="comanda", Key="categories/abc.webp")
    with pytest.raises(ValidationError):
        service.delete_file("https://elsewhere.example.com/file.png")


def test_from_settings_requires_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("app.services.upload_service.settings.S3_BUCKET", "")

    with pytest.raises(StorageNotConfiguredError):
        UploadService.from_settings()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_upload_endpoints(client: AsyncClient, tenant, login_as) -> None:
    s3 = MagicMock()
    app.dependency_overrides[get_upload_service] = lambda: _service(s3)
    login_as(tenant.manager)

    product = await client.post(
        "/api/v1/upload/product-image",
        files={"file": ("burger.jpg", b"jpeg-bytes", "image/jpeg")},
    )
    wrong_type = await client.post(
        "/api/v1/upload/image",
        files={"file": ("menu.pdf", b"%PDF", "application/pdf")},
    )
    logo = await client.post(
        "/api/v1/upload/branding",
        data={"type": "logo"},
        files={"file": ("logo.png", b"x" * (3 * 1024 * 1024), "image/png")},
    )
    removed = await client.request(
        "DELETE",
        "/api/v1/upload/file",
        json={"url": product.json()["url"]},
    )

    assert product.status_code == 201, product.text
    assert "/products/" in product.json()["url"]
    assert wrong_type.status_code == 400
    assert logo.status_code == 413
    assert removed.status_code == 200
    assert s3.delete_object.call_count == 1


@pytest.mark.asyncio
async def test_upload_requires_back_office_role(client: AsyncClient, tenant, login_as) -> None:
    app.dependency_overrides[get_upload_service] = lambda: _service(MagicMock())
    login_as(tenant.waiter)

    response = await client.post(
        "/api/v1/upload/image",
        files={"file": ("a.png", b"png", "image/png")},
    )

    assert response.status_code == 403
