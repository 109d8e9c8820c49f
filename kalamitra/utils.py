import base64
import json
import re
from typing import Any, Iterable, Optional
from urllib.parse import quote

from .constants import STORE_BASE_URL, WHATSAPP_SHARE_URL


def parse_bool_param(raw: Optional[str], default: bool = False) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def image_bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def image_bytes_to_data_url(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{image_bytes_to_base64(data)}"


def validate_upload(
    content_type: Optional[str],
    size_bytes: int,
    allowed_mime_types: Iterable[str],
    max_bytes: int,
) -> Optional[str]:
    """Return a user-facing message when the upload is rejected, else None."""
    allowed = {item.lower() for item in allowed_mime_types}
    if (content_type or "").lower() not in allowed:
        return "Invalid file type. Please upload a PNG, JPG, or WEBP."
    if size_bytes <= 0:
        return "Uploaded image is empty."
    if size_bytes > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        return f"File is too large. Please upload an image under {limit_mb:g}MB."
    return None


def safe_json_loads(raw: str) -> Any:
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:]
    cleaned = cleaned.strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        # Models sometimes wrap the object in prose.
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start != -1 and end != -1 and end > start:
            return json.loads(cleaned[start : end + 1])
        raise


def slugify(value: str) -> str:
    return re.sub(r"\s+", "-", value.strip().lower())


def product_url(title: str) -> str:
    return f"{STORE_BASE_URL}/mock-{slugify(title)}"


def whatsapp_share_url(title: str) -> str:
    message = f"Check out this amazing product: {title}\n\n{product_url(title)}"
    return f"{WHATSAPP_SHARE_URL}?text={quote(message, safe='')}"
