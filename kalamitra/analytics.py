"""Stand-in for an analytics sink: events are written to the application log."""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from .constants import ANALYTICS_EVENTS

logger = logging.getLogger(__name__)


def log_event(event_name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    if event_name not in ANALYTICS_EVENTS:
        raise ValueError(f"Unknown analytics event: {event_name}")
    record = {
        "event": event_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "payload": payload,
    }
    logger.info("[ANALYTICS EVENT] %s", json.dumps(record, ensure_ascii=False, default=str))
    return record
