import os
import uuid

import aioboto3

from foodfantasy.config import settings

ALLOWED_IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".webp"}
MAX_IMAGE_BYTES = 10 * 1024 * 1024

_session = aioboto3.Session()


def is_configured() -> bool:
    return all([
        settings.spaces_key,
        settings.spaces_secret,
        settings.spaces_bucket,
        settings.spaces_endpoint,
        settings.spaces_cdn_base,
    ])


def public_url(key: str) -> str:
    key = key.lstrip("/")
    return f"{settings.spaces_cdn_base.rstrip('/')}/{key}"


def image_key(folder: str, filename: str) -> str:
    """e.g. prod/foods/<uuid>.png; raises ValueError for unsupported extensions."""
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in ALLOWED_IMAGE_EXTS:
        raise ValueError("Invalid image type. Allowed: jpg, jpeg, png, webp")
    prefix = settings.spaces_prefix.strip("/")
    return f"{prefix}/{folder}/{uuid.uuid4().hex}{ext}"


async def put_public_object(*, key: str, body: bytes, content_type: str) -> str:
    """
    Uploads a public-read object to Spaces and returns the object key.
    """
    if not is_configured():
        raise RuntimeError("Spaces env vars not fully configured")

    key = key.lstrip("/")
    async with _session.client(
        "s3",
        region_name=settings.spaces_region,
        endpoint_url=settings.spaces_endpoint,
        aws_access_key_id=settings.spaces_key,
        aws_secret_access_key=settings.spaces_secret,
    ) as s3:
        await s3.put_object(
            Bucket=settings.spaces_bucket,
            Key=key,
            Body=body,
            ContentType=content_type or "application/octet-stream",
            ACL="public-read",
        )
    return key
