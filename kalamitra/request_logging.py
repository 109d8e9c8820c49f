"""Per-request JSON audit files under logs/requests/."""
import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from starlette.datastructures import FormData, UploadFile

logger = logging.getLogger(__name__)

_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
_MAX_FIELD_CHARS = 200


def _slug(path: str) -> str:
    slug = "".join(ch if ch.isalnum() else "_" for ch in path.strip("/"))
    return slug or "root"


def _summarize_value(value: Any) -> Any:
    if isinstance(value, UploadFile):
        return {
            "filename": value.filename or "",
            "content_type": value.content_type or "",
            "size_bytes": value.size,
        }
    if isinstance(value, str) and len(value) > _MAX_FIELD_CHARS:
        return value[:_MAX_FIELD_CHARS] + f"... ({len(value)} chars)"
    return value


def summarize_form(form: FormData) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for key, value in form.multi_items():
        item = _summarize_value(value)
        if key not in payload:
            payload[key] = item
        elif isinstance(payload[key], list):
            payload[key].append(item)
        else:
            payload[key] = [payload[key], item]
    return payload


async def _form_from_body(request: Request, body: bytes) -> Dict[str, Any]:
    async def receive() -> Dict[str, Any]:
        return {"type": "http.request", "body": body, "more_body": False}

    replay = Request(request.scope, receive)
    form = await replay.form()
    try:
        return summarize_form(form)
    finally:
        await form.close()


async def build_request_log(request: Request, body: Optional[bytes] = None) -> Dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    entry: Dict[str, Any] = {
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "method": request.method,
        "path": request.url.path,
        "query": dict(request.query_params),
        "client": request.client.host if request.client else "",
        "content_type": content_type,
        "user_agent": request.headers.get("user-agent", ""),
    }
    if body is None:
        return entry

    entry["body_size_bytes"] = len(body)
    if not body:
        return entry
    try:
        if "application/json" in content_type:
            entry["body"] = json.loads(body)
        elif "multipart/form-data" in content_type or "x-www-form-urlencoded" in content_type:
            entry["body"] = await _form_from_body(request, body)
    except Exception as exc:
        entry["body_parse_error"] = str(exc)
    return entry


class RequestLogWriter:
    def __init__(self, directory: Path, retention_days: int = 7, max_files: int = 1000):
        self.directory = directory
        self.retention_days = retention_days
        self.max_files = max_files

    def _target(self, basename: str) -> Path:
        candidate = self.directory / f"{basename}.json"
        counter = 1
        while candidate.exists():
            candidate = self.directory / f"{basename}_{counter}.json"
            counter += 1
        return candidate

    def write(self, entry: Dict[str, Any], status_code: int, duration_ms: float, error: str = "") -> None:
        record = dict(entry)
        record["response"] = {"status_code": status_code, "duration_ms": round(duration_ms, 2)}
        if error:
            record["response"]["error"] = error
        basename = "{}_{}_{}".format(
            datetime.now(timezone.utc).strftime(_TIMESTAMP_FORMAT),
            entry.get("method", "UNKNOWN"),
            _slug(entry.get("path", "request")),
        )
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with self._target(basename).open("w", encoding="utf-8") as f:
                json.dump(record, f, ensure_ascii=False, indent=2, default=str)
            self.prune()
        except OSError as exc:
            logger.warning("Could not write request log: %s", exc)

    def prune(self) -> None:
        files = sorted(
            (item for item in self.directory.glob("*.json") if item.is_file()),
            key=lambda item: item.stat().st_mtime,
        )
        if self.retention_days > 0:
            cutoff = (datetime.now(timezone.utc) - timedelta(days=self.retention_days)).timestamp()
            expired = [item for item in files if item.stat().st_mtime < cutoff]
            for item in expired:
                item.unlink(missing_ok=True)
            files = [item for item in files if item not in expired]
        if self.max_files > 0 and len(files) > self.max_files:
            for item in files[: len(files) - self.max_files]:
                item.unlink(missing_ok=True)
