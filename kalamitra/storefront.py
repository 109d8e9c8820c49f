from typing import Any, Dict

from .models import ProductListing
from .utils import product_url, whatsapp_share_url


def hero_image(listing: ProductListing) -> str:
    if listing.generated_image and listing.generated_image.image_urls:
        return listing.generated_image.image_urls[0]
    return listing.original_image_preview or ""


def build_store_preview(listing: ProductListing) -> Dict[str, Any]:
    """Storefront page model for an enriched listing (see Workspace.enriched_listing)."""
    gallery = []
    if listing.generated_image:
        gallery.extend(listing.generated_image.image_urls)
    if listing.original_image_preview:
        gallery.append(listing.original_image_preview)

    return {
        "listing": listing.to_dict(include_presentation=True),
        "hero_image": hero_image(listing),
        "gallery": gallery,
        "price": listing.pricing.ai_suggested if listing.pricing else None,
        "currency": "INR",
        "product_url": product_url(listing.title),
        "share_url": whatsapp_share_url(listing.title),
    }
