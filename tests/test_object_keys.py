import re

import pytest

from domain.exceptions import InvalidObjectKey
from domain.object_keys import (
    check_object_key_safety,
    extension_for,
    generate_object_key,
)

UUID_PATTERN = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"


def test_explicit_file_name_joined_with_path():
    key = generate_object_key("users/avatars", "avatar.jpg", "image/jpeg")
    assert key == "users/avatars/avatar.jpg"


def test_explicit_file_name_used_verbatim_without_path():
    # Extension is never rewritten for explicit names
    assert generate_object_key("", "photo.jpeg", "image/png") == "photo.jpeg"
    assert generate_object_key(None, "photo.jpeg", "image/png") == "photo.jpeg"


def test_generated_name_for_png_without_path():
    key = generate_object_key("", "", "image/png")
    assert re.fullmatch(UUID_PATTERN + r"\.png", key)
    assert len(key) == 36 + len(".png")
    assert "/" not in key


def test_generated_name_under_path():
    key = generate_object_key("uploads", None, "image/webp")
    assert re.fullmatch(r"uploads/" + UUID_PATTERN + r"\.webp", key)


def test_generated_names_are_unique():
    keys = {generate_object_key("", "", "image/jpeg") for _ in range(100)}
    assert len(keys) == 100


@pytest.mark.parametrize(
    "content_type, extension",
    [
        ("image/jpeg", ".jpg"),
        ("image/png", ".png"),
        ("image/webp", ".webp"),
        ("application/pdf", ".bin"),
        ("image/jpeg; charset=binary", ".bin"),
    ],
)
def test_extension_table(content_type, extension):
    assert extension_for(content_type) == extension


def test_trailing_separator_on_path_not_doubled():
    assert generate_object_key("users/", "a.jpg", "image/jpeg") == "users/a.jpg"


def test_join_performs_no_normalisation():
    assert generate_object_key("../../etc", "passwd", "image/jpeg") == "../../etc/passwd"


@pytest.mark.parametrize(
    "key",
    [
        "users/avatars/avatar.jpg",
        "avatar.jpg",
        "a/b/c/d.png",
        "..hidden/file.jpg",
    ],
)
def test_safe_keys_accepted(key):
    check_object_key_safety(key)


@pytest.mark.parametrize(
    "key",
    [
        "",
        "../../etc/passwd",
        "users/../admin.jpg",
        "/absolute.jpg",
        "users//avatar.jpg",
        "users/./avatar.jpg",
        "users\\avatar.jpg",
        "users/ava\x00tar.jpg",
        "trailing/",
    ],
)
def test_unsafe_keys_rejected(key):
    with pytest.raises(InvalidObjectKey) as excinfo:
        check_object_key_safety(key)
    assert excinfo.value.details["key"] == key
