"""Mock publishing targets.

They only simulate latency and occasional failure; nothing leaves the process.
Callers must not retry automatically since a real channel would not be
idempotent.
"""
import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Dict, Optional

from .config import Settings
from .models import ProductListing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishResult:
    success: bool
    message: str
    channel: str

    def to_dict(self) -> Dict[str, object]:
        return {"success": self.success, "message": self.message, "channel": self.channel}


class PublishChannel:
    def __init__(
        self,
        name: str,
        failure_probability: float,
        delay_seconds: float,
        success_message: str,
        failure_message: str,
        analytics_event: str,
        rng: Optional[random.Random] = None,
    ):
        self.name = name
        self.failure_probability = failure_probability
        self.delay_seconds = delay_seconds
        self.success_message = success_message
        self.failure_message = failure_message
        self.analytics_event = analytics_event
        self.rng = rng or random.Random()

    async def publish(self, listing: ProductListing) -> PublishResult:
        logger.info("Simulating publish to %s for %r", self.name, listing.title)
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        if self.rng.random() < self.failure_probability:
            logger.error("Mock %s API error: %s", self.name, self.failure_message)
            return PublishResult(success=False, message=self.failure_message, channel=self.name)

        logger.info("Published %r to %s", listing.title, self.name)
        return PublishResult(success=True, message=self.success_message, channel=self.name)


def build_channels(settings: Settings, rng: Optional[random.Random] = None) -> Dict[str, PublishChannel]:
    scale = settings.publish_delay_scale
    return {
        "instagram": PublishChannel(
            name="Instagram",
            failure_probability=settings.instagram_failure_rate,
            delay_seconds=1.5 * scale,
            success_message="Product was successfully published to your Instagram Shop!",
            failure_message="A mock API error occurred. Please try again.",
            analytics_event="insta_published",
            rng=rng,
        ),
        "ondc": PublishChannel(
            name="ONDC",
            failure_probability=settings.ondc_failure_rate,
            delay_seconds=2.5 * scale,
            success_message="Product was successfully listed on the ONDC network!",
            failure_message="ONDC publish failed: Invalid category mapping.",
            analytics_event="ondc_published",
            rng=rng,
        ),
    }
