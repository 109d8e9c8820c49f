import logging
import time
from pathlib import Path

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kalamitra import __version__
from kalamitra.channels import build_channels
from kalamitra.config import load_settings
from kalamitra.constants import DEFAULT_IMAGE_QUALITY, DEFAULT_LANGUAGE, DEFAULT_PHOTOSHOOT_MODE
from kalamitra.errors import (
    ActionInProgressError,
    EmptyResultError,
    InvalidResponseFormatError,
    KalaMitraError,
    PolicyBlockedError,
    TransportError,
    ValidationError,
    WorkspaceNotFoundError,
)
from kalamitra.llm.client import GeminiClient
from kalamitra.onboarding import OnboardingStore
from kalamitra.request_logging import RequestLogWriter, build_request_log
from kalamitra.service import ArtisanService
from kalamitra.storefront import build_store_preview
from kalamitra.utils import parse_bool_param, validate_upload
from kalamitra.workspace import WorkspaceStore

settings = load_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("kalamitra")

gemini_client = GeminiClient(
    api_key=settings.gemini_api_key,
    base_url=settings.gemini_base_url,
    timeout=settings.request_timeout,
)
channels = build_channels(settings)
service = ArtisanService(settings=settings, client=gemini_client, channels=channels)
workspaces = WorkspaceStore(
    ttl_seconds=settings.workspace_ttl_minutes * 60,
    max_items=settings.workspace_max_count,
)
onboarding_store = OnboardingStore(settings.onboarding_state_path)
request_log_writer = RequestLogWriter(
    Path(__file__).resolve().parent / "logs" / "requests",
    retention_days=settings.log_requests_retention_days,
    max_files=settings.log_requests_max_files,
)

app = FastAPI(title="KalaMitra Artisan Assistant", version=__version__)

# Allow local dev CORS for the single-page front-end.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    if not settings.log_requests:
        return await call_next(request)

    body = await request.body() if request.method in {"POST", "PUT", "PATCH"} else None
    entry = await build_request_log(request, body)
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as exc:
        request_log_writer.write(entry, 500, (time.perf_counter() - started) * 1000, str(exc))
        raise
    request_log_writer.write(entry, response.status_code, (time.perf_counter() - started) * 1000)
    return response


def _http_error(exc: KalaMitraError) -> HTTPException:
    if isinstance(exc, WorkspaceNotFoundError):
        status = 404
    elif isinstance(exc, ActionInProgressError):
        status = 409
    elif isinstance(exc, ValidationError):
        status = 400
    elif isinstance(exc, PolicyBlockedError):
        status = 422
    elif isinstance(exc, (EmptyResultError, InvalidResponseFormatError, TransportError)):
        status = 502
    else:
        status = 500
    return HTTPException(status_code=status, detail=str(exc))


def _get_workspace(workspace_id: str):
    try:
        return workspaces.get(workspace_id)
    except WorkspaceNotFoundError as exc:
        raise _http_error(exc) from exc


@app.post("/api/v1/workspaces")
def create_workspace() -> dict:
    return workspaces.create().summary()


@app.get("/api/v1/workspaces/{workspace_id}")
def get_workspace(workspace_id: str) -> dict:
    return _get_workspace(workspace_id).summary()


@app.post("/api/v1/workspaces/{workspace_id}/image")
async def upload_image(workspace_id: str, image: UploadFile = File(...)):
    workspace = _get_workspace(workspace_id)
    try:
        data = await image.read()
    except Exception:
        raise HTTPException(status_code=400, detail="Failed to read uploaded file.")

    message = validate_upload(
        image.content_type, len(data), settings.allowed_mime_types, settings.max_image_bytes
    )
    if message:
        raise HTTPException(status_code=400, detail=message)

    workspace.upload_image(data, image.content_type, image.filename or "")
    return JSONResponse(workspace.summary())


@app.post("/api/v1/workspaces/{workspace_id}/photoshoot")
async def generate_photoshoot(
    workspace_id: str,
    prompt: str = Form(""),
    mode: str = Form(DEFAULT_PHOTOSHOOT_MODE),
    quality: str = Form(DEFAULT_IMAGE_QUALITY),
    consent: str = Form("false"),
):
    workspace = _get_workspace(workspace_id)
    try:
        result = await service.generate_photoshoot(
            workspace,
            prompt=prompt,
            mode=mode or DEFAULT_PHOTOSHOOT_MODE,
            quality=quality or DEFAULT_IMAGE_QUALITY,
            consent=parse_bool_param(consent, False),
        )
    except KalaMitraError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:
        logger.exception("Photoshoot generation failed")
        raise HTTPException(status_code=500, detail="Internal server error.") from exc
    return JSONResponse(result.to_dict())


@app.post("/api/v1/workspaces/{workspace_id}/listing")
async def generate_listing(
    workspace_id: str,
    transcription: str = Form(""),
    notes: str = Form(""),
    language: str = Form(DEFAULT_LANGUAGE),
):
    workspace = _get_workspace(workspace_id)
    try:
        listing = await service.generate_listing(
            workspace, transcription=transcription, notes=notes, language=language
        )
    except KalaMitraError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:
        logger.exception("Listing generation failed")
        raise HTTPException(status_code=500, detail="Internal server error.") from exc
    return JSONResponse(listing.to_dict())


@app.get("/api/v1/workspaces/{workspace_id}/listing")
def get_listing(workspace_id: str):
    workspace = _get_workspace(workspace_id)
    if workspace.listing is None:
        raise HTTPException(status_code=404, detail="No listing has been generated yet.")
    return JSONResponse(workspace.listing.to_dict())


@app.get("/api/v1/workspaces/{workspace_id}/copilot")
def get_copilot(workspace_id: str):
    workspace = _get_workspace(workspace_id)
    try:
        session = workspace.require_copilot()
    except KalaMitraError as exc:
        raise _http_error(exc) from exc
    return JSONResponse(session.to_dict())


@app.post("/api/v1/workspaces/{workspace_id}/copilot/messages")
async def send_copilot_message(workspace_id: str, message: str = Form("")):
    workspace = _get_workspace(workspace_id)
    try:
        result = await service.send_chat_message(workspace, message)
    except KalaMitraError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:
        logger.exception("Copilot turn failed")
        raise HTTPException(status_code=500, detail="Internal server error.") from exc
    return JSONResponse(result)


@app.get("/api/v1/workspaces/{workspace_id}/store")
def get_store_preview(workspace_id: str):
    workspace = _get_workspace(workspace_id)
    try:
        workspace.require_view("store")
    except KalaMitraError as exc:
        raise _http_error(exc) from exc
    return JSONResponse(build_store_preview(workspace.enriched_listing()))


@app.post("/api/v1/workspaces/{workspace_id}/publish/{channel}")
async def publish_listing(workspace_id: str, channel: str):
    workspace = _get_workspace(workspace_id)
    try:
        result = await service.publish(workspace, channel.lower())
    except KalaMitraError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:
        logger.exception("Publishing to %s failed", channel)
        raise HTTPException(status_code=500, detail="Internal server error.") from exc
    return JSONResponse(result.to_dict())


@app.get("/api/v1/onboarding")
def get_onboarding() -> dict:
    return {"completed": onboarding_store.is_completed()}


@app.post("/api/v1/onboarding")
def complete_onboarding() -> dict:
    onboarding_store.mark_completed()
    return {"completed": True}


@app.get("/health")
def health() -> dict:
    return {
        "status": "ok",
        "models": {
            "image_model": settings.image_model,
            "text_model": settings.text_model,
        },
        "channels": sorted(channels),
    }
