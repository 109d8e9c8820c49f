from typing import Any, Dict, Optional

from .config import Settings
from .constants import IMAGE_QUALITIES, PHOTOSHOOT_MODES, PROMPT_MAX_LENGTH
from .errors import EmptyResultError, PolicyBlockedError, TransportError, ValidationError
from .llm.client import GeminiClient, inline_data, iter_parts
from .llm.prompts import (
    PHOTOSHOOT_MODE_TEMPLATES,
    PHOTOSHOOT_QUALITY_SUFFIXES,
    PHOTOSHOOT_SYSTEM_PROMPT,
)
from .llm.raw_log import RawPayloadLogger
from .models import GeneratedImageResult
from .utils import image_bytes_to_base64

EMPTY_RESULT_MESSAGE = (
    "AI did not return any images and provided no explanation. "
    "This could be a temporary issue. Please try a different prompt."
)


def build_photoshoot_instruction(prompt: str, mode: str, quality: str) -> str:
    if mode not in PHOTOSHOOT_MODE_TEMPLATES:
        raise ValidationError(f"Unknown photoshoot mode: {mode}.")
    if quality not in PHOTOSHOOT_QUALITY_SUFFIXES:
        raise ValidationError(f"Unknown image quality: {quality}.")
    template = PHOTOSHOOT_MODE_TEMPLATES[mode]
    if mode == "cleanup":
        instruction = template
    else:
        instruction = template.replace("{prompt}", prompt)
    return instruction + PHOTOSHOOT_QUALITY_SUFFIXES[quality]


def build_image_edit_request(
    image_base64: str,
    mime_type: str,
    prompt: str,
    mode: str,
    quality: str,
    model: str,
) -> Dict[str, Any]:
    """Assemble the keyword arguments for ``GeminiClient.generate_content``."""
    return {
        "model": model,
        "contents": [
            {
                "role": "user",
                "parts": [
                    {"inlineData": {"mimeType": mime_type, "data": image_base64}},
                    {"text": build_photoshoot_instruction(prompt, mode, quality)},
                ],
            }
        ],
        "system_instruction": PHOTOSHOOT_SYSTEM_PROMPT,
        "generation_config": {
            "responseModalities": ["IMAGE", "TEXT"],
            "candidateCount": 1,
        },
    }


def parse_image_edit_response(raw: Dict[str, Any]) -> GeneratedImageResult:
    """Collect every image across all candidates and the first text part seen.

    Raises PolicyBlockedError when no image came back but the model explained
    itself, and EmptyResultError when it returned nothing at all.
    """
    result = GeneratedImageResult()
    for part in iter_parts(raw or {}):
        blob = inline_data(part)
        if blob is not None:
            mime_type = blob.get("mimeType") or blob.get("mime_type") or "image/png"
            result.image_urls.append(f"data:{mime_type};base64,{blob['data']}")
        elif part.get("text") and result.text is None:
            result.text = part["text"]

    if not result.image_urls:
        if result.text:
            raise PolicyBlockedError(result.text)
        raise EmptyResultError(EMPTY_RESULT_MESSAGE)
    return result


class PhotoshootStudio:
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
        prompt: str,
        mode: str,
        quality: str,
    ) -> GeneratedImageResult:
        prompt = (prompt or "").strip()
        if mode not in PHOTOSHOOT_MODES:
            raise ValidationError(f"Unknown photoshoot mode: {mode}.")
        if quality not in IMAGE_QUALITIES:
            raise ValidationError(f"Unknown image quality: {quality}.")
        if mode != "cleanup" and not prompt:
            raise ValidationError("Please describe what you want for this photoshoot mode.")
        if len(prompt) > PROMPT_MAX_LENGTH:
            raise ValidationError(f"Prompt must be at most {PROMPT_MAX_LENGTH} characters.")

        request = build_image_edit_request(
            image_base64=image_bytes_to_base64(image_bytes),
            mime_type=mime_type,
            prompt=prompt,
            mode=mode,
            quality=quality,
            model=self.settings.image_model,
        )
        self._log_raw("photoshoot_request", request)
        try:
            raw = self.client.generate_content(**request)
        except TransportError as exc:
            raise TransportError(f"Failed to generate image: {exc}") from exc
        self._log_raw("photoshoot_response", raw)
        return parse_image_edit_response(raw)

    def _log_raw(self, name: str, payload: Any) -> None:
        if self.raw_logger is not None:
            self.raw_logger.log(name, payload)
