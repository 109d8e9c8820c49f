import json

import pytest

from kalamitra.config import Settings
from kalamitra.models import ProductAttributes, ProductListing
from tests.helpers import LISTING_PAYLOAD


@pytest.fixture
def settings(tmp_path):
    return Settings(
        gemini_api_key="test-key",
        image_model="image-model",
        text_model="text-model",
        onboarding_state_path=str(tmp_path / "onboarding.json"),
        publish_delay_scale=0,
        log_llm_raw=False,
        log_requests=False,
    )


@pytest.fixture
def listing_payload():
    return json.loads(json.dumps(LISTING_PAYLOAD))


@pytest.fixture
def listing():
    return ProductListing(
        title="Brass Ganesha Idol",
        attributes=ProductAttributes(
            material="Brass", dimensions="10cm height", time_to_make_hrs=4, style="Dhokra"
        ),
        care=["Polish with tamarind", "Store dry"],
        description="Lost-wax cast brass idol.",
        seo_bullets=["Brass", "Dhokra", "Handmade", "Idol", "Gift"],
        story="Cast by a family of Dhokra artisans.",
    )
