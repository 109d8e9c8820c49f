PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

LISTING_PAYLOAD = {
    "title": "Hand-painted Terracotta Diya Set",
    "attributes": {
        "material": "Terracotta",
        "dimensions": "3-inch diameter",
        "timeToMakeHrs": 2,
        "style": "Bengal folk motif",
    },
    "care": ["Wipe with a dry cloth", "Keep away from water"],
    "description": "A set of hand-painted clay lamps.",
    "seoBullets": ["Handmade", "Terracotta", "Diwali decor", "Eco-friendly", "Gift ready"],
    "story": "Shaped on a kick wheel in a village near Bankura.",
}


def text_response(text: str) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def image_part(data: str = "aW1n", mime_type: str = "image/png") -> dict:
    return {"inlineData": {"mimeType": mime_type, "data": data}}


def image_response(*parts: dict) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": list(parts)}}]}

