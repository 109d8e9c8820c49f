import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def _elide_inline_data(payload: Any) -> Any:
    if isinstance(payload, dict):
        result = {}
        for key, value in payload.items():
            if key in {"inlineData", "inline_data"} and isinstance(value, dict):
                blob = dict(value)
                data = blob.get("data")
                if isinstance(data, str):
                    blob["data"] = f"<{len(data)} base64 chars>"
                result[key] = blob
            else:
                result[key] = _elide_inline_data(value)
        return result
    if isinstance(payload, list):
        return [_elide_inline_data(item) for item in payload]
    return payload


class RawPayloadLogger:
    """Dumps Gemini requests and responses to ``logs/`` when LOG_LLM_RAW is on."""

    def __init__(self, enabled: bool, directory: Path):
        self.enabled = enabled
        self.directory = directory

    def log(self, name: str, payload: Any) -> None:
        if not self.enabled:
            return
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
            path = self.directory / f"{name}_{timestamp}.log"
            with path.open("w", encoding="utf-8") as f:
                if isinstance(payload, str):
                    f.write(payload)
                else:
                    json.dump(_elide_inline_data(payload), f, ensure_ascii=False, indent=2)
        except OSError:
            # Debug dumps must never break a generation request.
            return
