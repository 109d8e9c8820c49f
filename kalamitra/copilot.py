"""Buyer-facing chat assistant grounded in a single product listing."""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .constants import SHIPPING_POLICY
from .errors import EmptyResultError, TransportError, ValidationError
from .llm.client import GeminiClient, response_text
from .llm.prompts import COPILOT_GREETING_TEMPLATE, COPILOT_SYSTEM_PROMPT_TEMPLATE
from .models import ChatTurn, ProductListing


def build_copilot_context(listing: ProductListing) -> str:
    product_context = json.dumps(listing.to_dict(), ensure_ascii=False, indent=2)
    return COPILOT_SYSTEM_PROMPT_TEMPLATE.format(
        product_context=product_context,
        shipping_policy=SHIPPING_POLICY,
        care_guide=", ".join(listing.care),
    )


@dataclass
class CopilotSession:
    listing: ProductListing
    model: str
    system_instruction: str
    history: List[ChatTurn] = field(default_factory=list)

    @property
    def greeting(self) -> str:
        return COPILOT_GREETING_TEMPLATE.format(title=self.listing.title)

    def send_turn(self, client: GeminiClient, user_text: str) -> str:
        """Send one user message and return the model's reply.

        The user turn is appended before the call and removed again if the call
        fails, so history never ends on an unanswered user turn.
        """
        text = (user_text or "").strip()
        if not text:
            raise ValidationError("Message cannot be empty.")

        self.history.append(ChatTurn(role="user", text=text))
        try:
            raw = client.generate_content(
                model=self.model,
                contents=[turn.to_content() for turn in self.history],
                system_instruction=self.system_instruction,
            )
            reply = response_text(raw)
            if not reply:
                raise EmptyResultError("The assistant did not return a reply. Please try again.")
        except TransportError as exc:
            self.history.pop()
            raise TransportError(f"Sorry, I couldn't get a response. {exc}") from exc
        except Exception:
            self.history.pop()
            raise

        self.history.append(ChatTurn(role="model", text=reply))
        return reply

    def to_dict(self) -> Dict[str, Any]:
        return {
            "greeting": self.greeting,
            "history": [turn.to_dict() for turn in self.history],
        }


def create_session(listing: ProductListing, model: str) -> CopilotSession:
    return CopilotSession(
        listing=listing,
        model=model,
        system_instruction=build_copilot_context(listing),
    )
