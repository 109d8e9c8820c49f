from urllib.parse import parse_qs, urlparse

import pytest

from kalamitra.constants import ALLOWED_MIME_TYPES, MAX_IMAGE_BYTES
from kalamitra.utils import (
    image_bytes_to_data_url,
    product_url,
    safe_json_loads,
    validate_upload,
    whatsapp_share_url,
)


@pytest.mark.parametrize("mime", ["image/png", "image/jpeg", "image/webp"])
def test_upload_accepted(mime):
    assert validate_upload(mime, 1024, ALLOWED_MIME_TYPES, MAX_IMAGE_BYTES) is None


def test_upload_wrong_type():
    message = validate_upload("image/gif", 10, ALLOWED_MIME_TYPES, MAX_IMAGE_BYTES)
    assert message == "Invalid file type. Please upload a PNG, JPG, or WEBP."


def test_upload_too_large():
    message = validate_upload("image/png", MAX_IMAGE_BYTES + 1, ALLOWED_MIME_TYPES, MAX_IMAGE_BYTES)
    assert message == "File is too large. Please upload an image under 4MB."
    assert validate_upload("image/png", MAX_IMAGE_BYTES, ALLOWED_MIME_TYPES, MAX_IMAGE_BYTES) is None


def test_data_url():
    assert image_bytes_to_data_url(b"abc", "image/webp") == "data:image/webp;base64,YWJj"


def test_safe_json_loads_strips_prose():
    assert safe_json_loads('Here you go: {"a": 1} hope it helps') == {"a": 1}


def test_share_url():
    assert product_url("Blue  Pottery Vase") == "https://kalamitra.store/p/mock-blue-pottery-vase"
    parsed = urlparse(whatsapp_share_url("Blue Pottery Vase"))
    assert parsed.netloc == "wa.me"
    text = parse_qs(parsed.query)["text"][0]
    assert text == (
        "Check out this amazing product: Blue Pottery Vase\n\n"
        "https://kalamitra.store/p/mock-blue-pottery-vase"
    )
