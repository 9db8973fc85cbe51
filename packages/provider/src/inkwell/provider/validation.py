"""图片校验 -- 魔数识别 + 最小尺寸 + 头部可解析

provider 与图库下载的内容在进入持久化之前都经过此处。
"""

import io

from PIL import Image, UnidentifiedImageError

from .exceptions import InvalidArtifactError
from .models import RawArtifact

# 小于此字节数的响应视为错误页或空内容
MIN_ARTIFACT_BYTES = 64

ACCEPTED_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp", "image/svg+xml"})

_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
_JPEG_MAGIC = b"\xff\xd8\xff"
_UTF8_BOM = b"\xef\xbb\xbf"

# XML 声明、注释、DOCTYPE 之后 <svg 根元素可能出现的最远位置
_SVG_PROLOG_SCAN_BYTES = 4096
_SVG_PROLOG_PREFIXES = (b"<?xml", b"<!--", b"<!doctype svg")


def _is_svg(buffer: bytes) -> bool:
    head = buffer[:_SVG_PROLOG_SCAN_BYTES].removeprefix(_UTF8_BOM).lstrip().lower()
    if head.startswith(b"<svg"):
        return True
    if not head.startswith(_SVG_PROLOG_PREFIXES):
        return False
    return b"<svg" in head and b"<html" not in head


def detect_mime_type(buffer: bytes) -> str | None:
    """按魔数识别 MIME 类型，无法识别返回 None"""
    if buffer.startswith(_PNG_MAGIC):
        return "image/png"
    if buffer.startswith(_JPEG_MAGIC):
        return "image/jpeg"
    if len(buffer) >= 12 and buffer[:4] == b"RIFF" and buffer[8:12] == b"WEBP":
        return "image/webp"
    if _is_svg(buffer):
        return "image/svg+xml"
    return None


def inspect_artifact(buffer: bytes) -> RawArtifact:
    """校验图片并返回带实际 MIME 类型与尺寸的 RawArtifact

    Raises:
        InvalidArtifactError: 过小、类型无法识别或栅格图头部损坏
    """
    if len(buffer) < MIN_ARTIFACT_BYTES:
        raise InvalidArtifactError(f"图片过小: {len(buffer)} bytes")

    mime_type = detect_mime_type(buffer)
    if mime_type is None:
        raise InvalidArtifactError("无法识别的图片格式")

    if mime_type == "image/svg+xml":
        return RawArtifact(buffer=buffer, mime_type=mime_type)

    try:
        with Image.open(io.BytesIO(buffer)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError) as e:
        raise InvalidArtifactError(f"图片头部损坏: {e}") from e

    return RawArtifact(buffer=buffer, mime_type=mime_type, width=width, height=height)
