import json
import logging
from typing import Any, Dict, List, Optional

import requests

from ..errors import TransportError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin wrapper over the Gemini ``generateContent`` REST endpoint."""

    def __init__(self, api_key: str, base_url: str, timeout: int):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def generate_content(
        self,
        model: str,
        contents: List[Dict[str, Any]],
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        if not self.api_key:
            raise TransportError("GEMINI_API_KEY is not configured.")
        if not model:
            raise TransportError("Model name is empty.")

        payload: Dict[str, Any] = {"contents": contents}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if generation_config:
            payload["generationConfig"] = generation_config

        url = f"{self.base_url}/models/{model}:generateContent"
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        try:
            response = self.session.post(
                url, headers=headers, data=json.dumps(payload), timeout=self.timeout
            )
        except requests.RequestException as exc:
            logger.warning("Gemini request to %s failed: %s", model, exc)
            raise TransportError(f"Gemini request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.warning("Gemini %s returned %s", model, response.status_code)
            raise TransportError(f"Gemini returned {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportError(f"Failed to parse Gemini response: {exc}") from exc

        if not isinstance(data, dict):
            raise TransportError("Gemini response is not a JSON object.")
        return data


def iter_parts(response: Dict[str, Any]):
    """Yield every content part of every candidate, in order."""
    for candidate in response.get("candidates") or []:
        if not isinstance(candidate, dict):
            continue
        content = candidate.get("content") or {}
        for part in content.get("parts") or []:
            if isinstance(part, dict):
                yield part


def inline_data(part: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    # The REST API answers in camelCase; some proxies relay snake_case.
    blob = part.get("inlineData") or part.get("inline_data")
    if isinstance(blob, dict) and blob.get("data"):
        return blob
    return None


def response_text(response: Dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate."""
    candidates = response.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(
        part["text"]
        for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str) and not part.get("thought")
    )
