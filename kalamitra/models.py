import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _require_str(payload: Dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string.")
    return value


def _require_number(payload: Dict[str, Any], key: str) -> float:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field '{key}' must be a number.")
    if not math.isfinite(value):
        raise ValueError(f"Field '{key}' must be a finite number.")
    return value


def _require_str_list(payload: Dict[str, Any], key: str) -> List[str]:
    value = payload.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"Field '{key}' must be a list of strings.")
    return list(value)


@dataclass(frozen=True)
class ProductAttributes:
    material: str
    dimensions: str
    time_to_make_hrs: float
    style: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "material": self.material,
            "dimensions": self.dimensions,
            "timeToMakeHrs": self.time_to_make_hrs,
            "style": self.style,
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "ProductAttributes":
        if not isinstance(payload, dict):
            raise ValueError("Field 'attributes' must be an object.")
        return cls(
            material=_require_str(payload, "material"),
            dimensions=_require_str(payload, "dimensions"),
            time_to_make_hrs=_require_number(payload, "timeToMakeHrs"),
            style=_require_str(payload, "style"),
        )


@dataclass(frozen=True)
class PricingSuggestion:
    ai_suggested: int
    min_acceptable: int
    reasoning: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aiSuggested": self.ai_suggested,
            "minAcceptable": self.min_acceptable,
            "reasoning": self.reasoning,
        }

    @classmethod
    def from_dict(cls, payload: Any) -> "PricingSuggestion":
        if not isinstance(payload, dict):
            raise ValueError("Field 'pricing' must be an object.")
        return cls(
            ai_suggested=int(_require_number(payload, "aiSuggested")),
            min_acceptable=int(_require_number(payload, "minAcceptable")),
            reasoning=_require_str(payload, "reasoning"),
        )


@dataclass
class GeneratedImageResult:
    image_urls: List[str] = field(default_factory=list)
    text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"imageUrls": list(self.image_urls), "text": self.text}


@dataclass
class ProductListing:
    title: str
    attributes: ProductAttributes
    care: List[str]
    description: str
    seo_bullets: List[str]
    story: str
    pricing: Optional[PricingSuggestion] = None
    # Presentation only; never sent to or expected from the model.
    original_image_preview: Optional[str] = None
    generated_image: Optional[GeneratedImageResult] = None

    def to_dict(self, include_presentation: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "attributes": self.attributes.to_dict(),
            "care": list(self.care),
            "description": self.description,
            "seoBullets": list(self.seo_bullets),
            "story": self.story,
        }
        if self.pricing is not None:
            data["pricing"] = self.pricing.to_dict()
        if include_presentation:
            data["originalImagePreview"] = self.original_image_preview
            data["generatedImage"] = (
                self.generated_image.to_dict() if self.generated_image else None
            )
        return data

    @classmethod
    def from_dict(cls, payload: Any) -> "ProductListing":
        """Build a listing from its wire form, raising ValueError on schema violations."""
        if not isinstance(payload, dict):
            raise ValueError("Listing must be a JSON object.")
        pricing_raw = payload.get("pricing")
        return cls(
            title=_require_str(payload, "title"),
            attributes=ProductAttributes.from_dict(payload.get("attributes")),
            care=_require_str_list(payload, "care"),
            description=_require_str(payload, "description"),
            seo_bullets=_require_str_list(payload, "seoBullets"),
            story=_require_str(payload, "story"),
            pricing=PricingSuggestion.from_dict(pricing_raw) if pricing_raw is not None else None,
        )


@dataclass(frozen=True)
class ChatTurn:
    role: str
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "text": self.text}

    def to_content(self) -> Dict[str, Any]:
        return {"role": self.role, "parts": [{"text": self.text}]}
