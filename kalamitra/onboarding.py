import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict

from .constants import ONBOARDING_KEY

logger = logging.getLogger(__name__)


class OnboardingStore:
    """Persists whether the onboarding tour has been shown, in a small JSON file."""

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable onboarding state %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def is_completed(self) -> bool:
        with self._lock:
            return bool(self._read().get(ONBOARDING_KEY))

    def mark_completed(self) -> None:
        with self._lock:
            data = self._read()
            if data.get(ONBOARDING_KEY):
                return
            data[ONBOARDING_KEY] = True
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
