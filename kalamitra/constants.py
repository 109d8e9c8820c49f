ALLOWED_MIME_TYPES = ("image/png", "image/jpeg", "image/webp")
MAX_IMAGE_BYTES = 4 * 1024 * 1024

PROMPT_MAX_LENGTH = 1000
TRANSCRIPTION_MAX_LENGTH = 2000
NOTES_MAX_LENGTH = 500

DEFAULT_LANGUAGE = "English"
SUPPORTED_LANGUAGES = ("English", "Hindi", "Bengali", "Tamil")

PHOTOSHOOT_MODES = (
    "cleanup",
    "background_replace",
    "lifestyle",
    "colorway",
    "scene_lighting",
    "pose_adjust",
)
DEFAULT_PHOTOSHOOT_MODE = "lifestyle"

IMAGE_QUALITIES = ("fast", "high")
DEFAULT_IMAGE_QUALITY = "fast"

VIEWS = ("photoshoot", "listing", "copilot", "store")
LISTING_GATED_VIEWS = ("copilot", "store")

# Per-unit material cost factors (INR). Keys are lower-cased material names.
MATERIAL_FACTORS = {
    "terracotta": 50,
    "clay": 50,
    "wood": 100,
    "metal": 150,
    "brass": 180,
    "textile": 70,
    "cotton": 70,
    "silk": 200,
}
DEFAULT_MATERIAL_FACTOR = 100
DEFAULT_DOMINANT_SIZE = 5
SIZE_FACTOR_MULTIPLIER = 10
HOURLY_WAGE_INR = 120
MIN_ACCEPTABLE_RATIO = 0.9
# No historical pricing data exists yet, so this flat locality factor is the
# whole market adjustment.
LOCALITY_FACTOR = 1.1

SHIPPING_POLICY = (
    "We ship all over India within 5-7 business days. "
    "Shipping is free on orders over ₹1000."
)

ONBOARDING_KEY = "kalamitra_onboarding_complete"

STORE_BASE_URL = "https://kalamitra.store/p"
WHATSAPP_SHARE_URL = "https://wa.me/"

ANALYTICS_EVENTS = (
    "listing_created",
    "photoshoot_created",
    "checkout_initiated",
    "payment_captured",
    "ondc_published",
    "insta_published",
)
