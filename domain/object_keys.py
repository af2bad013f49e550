"""
Object key derivation.

Keys are derived from the request alone; nothing here touches storage.
"""

import uuid
from typing import Optional

from domain.exceptions import InvalidObjectKey

KEY_SEPARATOR = "/"
DEFAULT_EXTENSION = ".bin"

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}


def extension_for(content_type: str) -> str:
    """Map a content type to a file extension, ``.bin`` when unknown."""
    return CONTENT_TYPE_EXTENSIONS.get(content_type, DEFAULT_EXTENSION)


def generate_object_key(
    path: Optional[str], file_name: Optional[str], content_type: str
) -> str:
    """
    Create the object key for an upload.

    Args:
        path: Optional key prefix, e.g. ``users/avatars``
        file_name: Optional explicit name; used verbatim when given
        content_type: MIME type, selects the extension for generated names

    Returns:
        The object key

    Example:
        >>> generate_object_key("users/avatars", "avatar.jpg", "image/jpeg")
        'users/avatars/avatar.jpg'
    """
    if file_name:
        name = file_name
    else:
        name = f"{uuid.uuid4()}{extension_for(content_type)}"

    if not path:
        return name
    if path.endswith(KEY_SEPARATOR):
        return f"{path}{name}"
    return f"{path}{KEY_SEPARATOR}{name}"


def check_object_key_safety(object_key: str) -> None:
    """
    Reject keys that could escape their prefix or confuse path-style backends.

    Raises:
        InvalidObjectKey: on a leading separator, backslashes, empty,
            ``.`` or ``..`` segments, or control characters
    """
    details = {"key": object_key}

    if not object_key:
        raise InvalidObjectKey("Object key is empty", details)
    if object_key.startswith(KEY_SEPARATOR):
        raise InvalidObjectKey("Object key must not start with '/'", details)
    if "\\" in object_key:
        raise InvalidObjectKey("Object key must not contain backslashes", details)
    if any(ord(ch) < 32 or ord(ch) == 127 for ch in object_key):
        raise InvalidObjectKey("Object key contains control characters", details)

    for segment in object_key.split(KEY_SEPARATOR):
        if segment in ("", ".", ".."):
            raise InvalidObjectKey(
                f"Object key contains an invalid path segment: {segment!r}", details
            )
