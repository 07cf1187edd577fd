"""Object key and URL utilities for the media uploader."""

import hashlib
from typing import Optional

ALLOWED_EXTENSIONS = frozenset({"png", "jpg", "jpeg"})

PUBLIC_URL_TEMPLATE = "https://{bucket}.s3.{region}.amazonaws.com/{key}"

CONTENT_HASH_LENGTH = 12


def file_extension(file_name: Optional[str]) -> Optional[str]:
    """
    Extract the lowercased extension from a declared file name.

    Args:
        file_name: Declared name such as "Front Yard.JPG"

    Returns:
        The extension without the dot ("jpg"), or None when the name is
        missing or has no dot.
    """
    if not file_name or "." not in file_name:
        return None
    extension = file_name.rsplit(".", 1)[1].lower()
    return extension or None


def is_allowed_extension(extension: Optional[str]) -> bool:
    return extension is not None and extension in ALLOWED_EXTENSIONS


def derive_upload_key(file_name: str) -> str:
    """
    Derive the object key from a declared file name.

    Every space becomes an underscore; no other character is touched.
    Two assets with the same name map to the same key.
    """
    return file_name.replace(" ", "_")


def derive_content_hash_key(file_name: str, payload: bytes) -> str:
    """
    Derive a key that is unique per payload.

    The first hex digits of the payload's SHA-256 digest are inserted before
    the extension: "Front Yard.jpg" -> "Front_Yard-<digest>.jpg".
    """
    base_key = derive_upload_key(file_name)
    digest = hashlib.sha256(payload).hexdigest()[:CONTENT_HASH_LENGTH]

    if "." in base_key:
        stem, extension = base_key.rsplit(".", 1)
        return f"{stem}-{digest}.{extension}"
    return f"{base_key}-{digest}"


def build_public_url(bucket: str, region: str, key: str) -> str:
    """
    Compose the virtual-hosted-style public URL for an object.

    The key is inserted verbatim so URLs match objects stored by earlier
    releases of the mobile app.
    """
    return PUBLIC_URL_TEMPLATE.format(bucket=bucket, region=region, key=key)
