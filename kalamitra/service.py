import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool

from .analytics import log_event
from .channels import PublishChannel, PublishResult
from .config import Settings
from .errors import ValidationError
from .listing import ListingGenerator
from .llm.client import GeminiClient
from .llm.raw_log import RawPayloadLogger
from .models import GeneratedImageResult, ProductListing
from .photoshoot import PhotoshootStudio
from .workspace import Workspace

logger = logging.getLogger(__name__)


class ArtisanService:
    """Runs each artisan action against a workspace, one request per action at a time."""

    def __init__(
        self,
        settings: Settings,
        client: GeminiClient,
        channels: Dict[str, PublishChannel],
        raw_logger: Optional[RawPayloadLogger] = None,
    ):
        self.settings = settings
        self.client = client
        self.channels = channels
        if raw_logger is None:
            raw_logger = RawPayloadLogger(
                settings.log_llm_raw, Path(__file__).resolve().parent.parent / "logs"
            )
        self.studio = PhotoshootStudio(settings, client, raw_logger)
        self.listing_generator = ListingGenerator(settings, client, raw_logger)

    async def generate_photoshoot(
        self,
        workspace: Workspace,
        prompt: str,
        mode: str,
        quality: str,
        consent: bool,
    ) -> GeneratedImageResult:
        if not consent:
            raise ValidationError("Please provide consent to use AI image generation.")
        image = workspace.require_image()
        revision = workspace.revision
        with workspace.action("photoshoot"):
            result = await run_in_threadpool(
                self.studio.generate,
                image_bytes=image.data,
                mime_type=image.mime_type,
                prompt=prompt,
                mode=mode,
                quality=quality,
            )
        if workspace.commit_generated_image(result, revision):
            log_event(
                "photoshoot_created",
                {"mode": mode, "quality": quality, "images": len(result.image_urls)},
            )
        else:
            logger.info("Discarding photoshoot result for replaced image in %s", workspace.id)
        return result

    async def generate_listing(
        self,
        workspace: Workspace,
        transcription: str,
        notes: str,
        language: str,
    ) -> ProductListing:
        image = workspace.require_image()
        revision = workspace.revision
        with workspace.action("listing"):
            listing = await run_in_threadpool(
                self.listing_generator.generate,
                image_bytes=image.data,
                mime_type=image.mime_type,
                transcription=transcription,
                notes=notes,
                language=language,
            )
        if workspace.commit_listing(listing, revision, self.settings.text_model):
            log_event(
                "listing_created",
                {
                    "productId": listing.title,
                    "material": listing.attributes.material,
                    "language": language,
                },
            )
        else:
            logger.info("Discarding listing for replaced image in %s", workspace.id)
        return listing

    async def send_chat_message(self, workspace: Workspace, message: str) -> Dict[str, Any]:
        session = workspace.require_copilot()
        with workspace.action("chat"):
            reply = await run_in_threadpool(session.send_turn, self.client, message)
        return {"reply": reply, **session.to_dict()}

    async def publish(self, workspace: Workspace, channel_key: str) -> PublishResult:
        channel = self.channels.get(channel_key)
        if channel is None:
            raise ValidationError(f"Unknown channel: {channel_key}.")
        listing = workspace.require_listing()
        with workspace.action(f"publish:{channel_key}"):
            result = await channel.publish(listing)
        if result.success:
            payload: Dict[str, Any] = {
                "productId": listing.title,
                "material": listing.attributes.material,
            }
            if channel_key == "ondc" and listing.pricing:
                payload["price"] = listing.pricing.ai_suggested
            log_event(channel.analytics_event, payload)
        return result
