import json
from unittest.mock import MagicMock

import pytest

from kalamitra.errors import InvalidResponseFormatError, TransportError, ValidationError
from kalamitra.listing import (
    ListingGenerator,
    build_listing_prompt,
    build_listing_request,
    parse_listing_payload,
    parse_listing_response,
)
from kalamitra.models import ProductAttributes, ProductListing
from kalamitra.pricing import estimate_price
from tests.helpers import PNG_BYTES, text_response


def test_prompt_without_transcription_or_notes():
    prompt = build_listing_prompt("", "  ", "Hindi")
    assert "TRANSCRIPTION:\nNot provided." in prompt
    assert "NOTES:\nNone." in prompt
    assert "90-word product description in Hindi" in prompt
    assert "exactly 5 concise SEO-friendly bullet points in Hindi" in prompt
    assert "70-100 word provenance story in Hindi" in prompt
    assert "Be creative but plausible" in prompt


def test_prompt_keeps_transcription_and_conflict_rule():
    prompt = build_listing_prompt("My grandmother taught me {this} craft.", "Fragile", "English")
    assert "My grandmother taught me {this} craft." in prompt
    assert "NOTES:\nFragile" in prompt
    assert "Image is the source of truth" in prompt
    assert "IGNORE the conflicting part of the transcription" in prompt


def test_request_declares_structured_output():
    request = build_listing_request("QUJD", "image/webp", "", "", "Tamil", "text-model")
    config = request["generation_config"]
    assert config["responseMimeType"] == "application/json"
    schema = config["responseSchema"]
    assert schema["required"] == ["title", "attributes", "care", "description", "seoBullets", "story"]
    assert schema["properties"]["attributes"]["required"] == [
        "material", "dimensions", "timeToMakeHrs", "style",
    ]
    assert request["contents"][0]["parts"][0]["inlineData"]["mimeType"] == "image/webp"
    assert "Indian handicrafts" in request["system_instruction"]


def test_parse_attaches_pricing(listing_payload):
    listing = parse_listing_response(text_response(json.dumps(listing_payload)))
    assert listing.title == listing_payload["title"]
    assert listing.attributes == ProductAttributes("Terracotta", "3-inch diameter", 2, "Bengal folk motif")
    assert listing.seo_bullets == listing_payload["seoBullets"]
    # 2*120 + 50 + 30 = 320
    assert listing.pricing.min_acceptable == 288
    assert listing.pricing.ai_suggested == 352


def test_parse_accepts_fenced_json(listing_payload):
    content = "```json\n" + json.dumps(listing_payload) + "\n```"
    assert parse_listing_payload(content).story == listing_payload["story"]


@pytest.mark.parametrize("content", ["", "not json at all", "[1, 2, 3]", '{"title": "only"}'])
def test_invalid_content_rejected(content):
    with pytest.raises(InvalidResponseFormatError) as info:
        parse_listing_payload(content)
    assert "try generating the listing again" in str(info.value)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.pop("story"),
        lambda p: p["attributes"].pop("material"),
        lambda p: p["attributes"].update(timeToMakeHrs="four"),
        lambda p: p["attributes"].update(timeToMakeHrs=float("inf")),
        lambda p: p["attributes"].update(timeToMakeHrs=float("nan")),
        lambda p: p.update(care="Wipe gently"),
        lambda p: p.update(seoBullets=["ok", 3]),
    ],
)
def test_schema_violations_rejected(listing_payload, mutate):
    mutate(listing_payload)
    with pytest.raises(InvalidResponseFormatError):
        parse_listing_payload(json.dumps(listing_payload))


def test_parse_survives_extreme_numbers(listing_payload):
    listing_payload["attributes"]["timeToMakeHrs"] = 1e308
    listing_payload["attributes"]["dimensions"] = "9" * 400 + " cm"

    listing = parse_listing_payload(json.dumps(listing_payload))

    assert listing.pricing.min_acceptable <= listing.pricing.ai_suggested


def test_round_trip_preserves_fields(listing_payload):
    listing = parse_listing_payload(json.dumps(listing_payload))
    reparsed = parse_listing_payload(json.dumps(listing.to_dict()))
    assert reparsed == listing
    assert ProductListing.from_dict(json.loads(json.dumps(listing.to_dict()))) == listing
    assert reparsed.pricing == estimate_price(listing.attributes)


def test_generator_calls_text_model(settings, listing_payload):
    client = MagicMock()
    client.generate_content.return_value = text_response(json.dumps(listing_payload))
    generator = ListingGenerator(settings, client)

    listing = generator.generate(PNG_BYTES, "image/png", "Took me two hours.", "", "Bengali")

    assert listing.pricing is not None
    kwargs = client.generate_content.call_args.kwargs
    assert kwargs["model"] == "text-model"
    assert "Took me two hours." in kwargs["contents"][0]["parts"][1]["text"]


@pytest.mark.parametrize(
    "transcription,notes,language",
    [("x" * 2001, "", "English"), ("", "y" * 501, "English"), ("", "", "Klingon")],
)
def test_generator_validates_inputs(settings, transcription, notes, language):
    client = MagicMock()
    with pytest.raises(ValidationError):
        ListingGenerator(settings, client).generate(PNG_BYTES, "image/png", transcription, notes, language)
    client.generate_content.assert_not_called()


def test_generator_wraps_transport_errors(settings):
    client = MagicMock()
    client.generate_content.side_effect = TransportError("Gemini request failed: timed out")
    with pytest.raises(TransportError) as info:
        ListingGenerator(settings, client).generate(PNG_BYTES, "image/png")
    assert str(info.value) == "Failed to generate listing: Gemini request failed: timed out"


def test_generator_does_not_retry_bad_format(settings):
    client = MagicMock()
    client.generate_content.return_value = text_response("{broken")
    with pytest.raises(InvalidResponseFormatError):
        ListingGenerator(settings, client).generate(PNG_BYTES, "image/png")
    assert client.generate_content.call_count == 1
