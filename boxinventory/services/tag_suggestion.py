"""Tag suggestion service - asks a Gemini model for searchable tags for an item name."""
import json
import logging
from typing import List, Optional

import httpx

from boxinventory.config import settings
from boxinventory.exceptions import SuggestionFailure

logger = logging.getLogger(__name__)

MAX_TAGS = 5

PROMPT = (
    "Generate 3-5 relevant, single-word, lowercase, searchable tags for the "
    "following inventory item: '{name}'. Return the response as a JSON array "
    "of strings. For example, for 'iPhone 15 Pro Max', you might return: "
    '["electronics", "apple", "smartphone", "mobile", "gadget"]'
)


def clean_suggestions(raw: List[str]) -> List[str]:
    """Lowercase single words, empties dropped, at most ``MAX_TAGS``."""
    tags = []
    for tag in raw:
        words = tag.strip().lower().split()
        if words:
            tags.append(words[0])
    return tags[:MAX_TAGS]


async def request_tags(item_name: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> List[str]:
    """
    Call the model and return its raw tag list.
    
    Raises SuggestionFailure when the key is missing, the request fails
    or the reply is not a JSON array of strings.
    """
    if not settings.TAG_SUGGESTION_API_KEY:
        raise SuggestionFailure("Tag suggestion API key is not configured")
    
    url = f"{settings.TAG_SUGGESTION_URL}/{settings.TAG_SUGGESTION_MODEL}:generateContent"
    body = {
        "contents": [{"parts": [{"text": PROMPT.format(name=item_name)}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": {"type": "ARRAY", "items": {"type": "STRING"}},
        },
    }
    try:
        async with httpx.AsyncClient(timeout=settings.TAG_SUGGESTION_TIMEOUT, transport=transport) as client:
            response = await client.post(url, json=body, headers={
                "x-goog-api-key": settings.TAG_SUGGESTION_API_KEY,
            })
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise SuggestionFailure(f"Tag suggestion request failed: {e}") from e
    
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
        if not isinstance(text, str):
            raise TypeError(f"reply text is {type(text).__name__}, not a string")
        tags = json.loads(text.strip())
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise SuggestionFailure(f"Malformed tag suggestion response: {e}") from e
    
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise SuggestionFailure("Tag suggestion response is not a list of strings")
    return tags


async def suggest_tags(item_name: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> List[str]:
    """
    Suggested tags for an item name, or an empty list on any failure.
    Tags are optional enrichment, so failures are logged and never raised.
    """
    name = (item_name or "").strip()
    if not name:
        return []
    try:
        raw = await request_tags(name, transport=transport)
    except SuggestionFailure as e:
        logger.warning("No tag suggestions for %r: %s", name, e)
        return []
    return clean_suggestions(raw)
