# saivd/core/watermark.py

import re

_EXTENSION = re.compile(r"(\.[^./]+)$")
_WATERMARKED_SUFFIX = re.compile(r"-watermarked(\.[^./]+)$")


def normalize_watermark_path(path: str) -> str:
    """
    s3://bucket/folder/video.mp4 -> folder/video.mp4
    Anything that is not an s3:// URL is returned unchanged.
    """
    if not path.startswith("s3://"):
        return path
    remainder = path[len("s3://"):]
    bucket, sep, key = remainder.partition("/")
    if not sep or not key:
        return path
    return key


def watermarked_key_for(original_key: str) -> str:
    """videos/u/a.mp4 -> videos/u/a-watermarked.mp4 (suffix before the extension)"""
    if _EXTENSION.search(original_key):
        return _EXTENSION.sub(r"-watermarked\1", original_key)
    return f"{original_key}-watermarked"


def original_key_for(watermarked_key: str) -> str:
    return _WATERMARKED_SUFFIX.sub(r"\1", watermarked_key)
