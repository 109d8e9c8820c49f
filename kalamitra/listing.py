import json
from typing import Any, Dict, Optional

from .config import Settings
from .constants import (
    DEFAULT_LANGUAGE,
    NOTES_MAX_LENGTH,
    SUPPORTED_LANGUAGES,
    TRANSCRIPTION_MAX_LENGTH,
)
from .errors import InvalidResponseFormatError, TransportError, ValidationError
from .llm.client import GeminiClient, response_text
from .llm.prompts import (
    LISTING_EMPTY_NOTES,
    LISTING_EMPTY_TRANSCRIPTION,
    LISTING_RESPONSE_SCHEMA,
    LISTING_SYSTEM_PROMPT,
    LISTING_USER_PROMPT_TEMPLATE,
)
from .llm.raw_log import RawPayloadLogger
from .models import ProductListing
from .pricing import estimate_price
from .utils import image_bytes_to_base64, safe_json_loads

INVALID_FORMAT_MESSAGE = (
    "The AI returned an invalid response format. Please try generating the listing again."
)


def build_listing_prompt(transcription: str, notes: str, language: str) -> str:
    return LISTING_USER_PROMPT_TEMPLATE.format(
        transcription=transcription.strip() or LISTING_EMPTY_TRANSCRIPTION,
        notes=notes.strip() or LISTING_EMPTY_NOTES,
        language=language or DEFAULT_LANGUAGE,
    )


def build_listing_request(
    image_base64: str,
    mime_type: str,
    transcription: str,
    notes: str,
    language: str,
    model: str,
) -> Dict[str, Any]:
    return {
        "model": model,
        "contents": [
            {
                "role": "user",
                "parts": [
                    {"inlineData": {"mimeType": mime_type, "data": image_base64}},
                    {"text": build_listing_prompt(transcription, notes, language)},
                ],
            }
        ],
        "system_instruction": LISTING_SYSTEM_PROMPT,
        "generation_config": {
            "responseMimeType": "application/json",
            "responseSchema": LISTING_RESPONSE_SCHEMA,
        },
    }


def parse_listing_payload(content: str) -> ProductListing:
    """Parse the model's JSON text and attach a fresh price suggestion."""
    try:
        parsed = safe_json_loads(content or "")
    except json.JSONDecodeError as exc:
        raise InvalidResponseFormatError(INVALID_FORMAT_MESSAGE) from exc
    try:
        listing = ProductListing.from_dict(parsed)
    except ValueError as exc:
        raise InvalidResponseFormatError(INVALID_FORMAT_MESSAGE) from exc

    listing.pricing = estimate_price(listing.attributes)
    return listing


def parse_listing_response(raw: Dict[str, Any]) -> ProductListing:
    return parse_listing_payload(response_text(raw or {}))


class ListingGenerator:
    def __init__(
        self,
        settings: Settings,
        client: GeminiClient,
        raw_logger: Optional[RawPayloadLogger] = None,
    ):
        self.settings = settings
        self.client = client
        self.raw_logger = raw_logger

    def generate(
        self,
        image_bytes: bytes,
        mime_type: str,
        transcription: str = "",
        notes: str = "",
        language: str = DEFAULT_LANGUAGE,
    ) -> ProductListing:
        transcription = transcription or ""
        notes = notes or ""
        language = language or DEFAULT_LANGUAGE
        if language not in SUPPORTED_LANGUAGES:
            raise ValidationError("Invalid language.")
        if len(transcription) > TRANSCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"Transcription must be at most {TRANSCRIPTION_MAX_LENGTH} characters."
            )
        if len(notes) > NOTES_MAX_LENGTH:
            raise ValidationError(f"Notes must be at most {NOTES_MAX_LENGTH} characters.")

        request = build_listing_request(
            image_base64=image_bytes_to_base64(image_bytes),
            mime_type=mime_type,
            transcription=transcription,
            notes=notes,
            language=language,
            model=self.settings.text_model,
        )
        self._log_raw("listing_request", request)
        try:
            raw = self.client.generate_content(**request)
        except TransportError as exc:
            raise TransportError(f"Failed to generate listing: {exc}") from exc
        self._log_raw("listing_response", raw)

        try:
            return parse_listing_response(raw)
        except InvalidResponseFormatError:
            self._log_raw("listing_parse_error", {"content": response_text(raw)})
            raise

    def _log_raw(self, name: str, payload: Any) -> None:
        if self.raw_logger is not None:
            self.raw_logger.log(name, payload)
