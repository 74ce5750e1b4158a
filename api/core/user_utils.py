from __future__ import annotations

import json
import logging
from typing import Any, List

from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 200
ANONYMOUS_SESSION = "anonymous"


def _ordered_unique_ids(values: Any) -> List[str]:
    if not isinstance(values, (list, tuple)):
        return []
    ids: List[str] = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            continue
        text = str(value).strip()
        if text:
            ids.append(text)
    # Keep the most recent occurrence of each id
    deduped = list(reversed(dict.fromkeys(reversed(ids))))
    return deduped[-HISTORY_LIMIT:]


class DeckRequest(BaseModel):
    """
    Body of a deck request. Every field is optional and invalid values fall
    back to their defaults rather than failing the request.
    """

    q: str = ""
    reroll: int = 0
    likes: List[str] = []
    passes: List[str] = []

    @field_validator("q", mode="before")
    @classmethod
    def _coerce_query(cls, value: Any) -> str:
        if not isinstance(value, str):
            return ""
        return value.strip()

    @field_validator("reroll", mode="before")
    @classmethod
    def _coerce_reroll(cls, value: Any) -> int:
        if isinstance(value, bool):
            return 0
        try:
            reroll = int(value)
        except (TypeError, ValueError, OverflowError):
            return 0
        return max(0, reroll)

    @field_validator("likes", "passes", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> List[str]:
        return _ordered_unique_ids(value)


def parse_deck_request(raw: bytes | str | None) -> DeckRequest:
    if not raw:
        return DeckRequest()
    try:
        payload = json.loads(raw)
    except ValueError:
        logger.info("Deck request body is not valid JSON; using defaults.")
        return DeckRequest()
    if not isinstance(payload, dict):
        return DeckRequest()
    try:
        return DeckRequest.model_validate(payload)
    except ValidationError:
        logger.info("Deck request body failed validation; using defaults.")
        return DeckRequest()


def resolve_session_id(header_value: str | None, cookie_value: str | None) -> str:
    for candidate in (header_value, cookie_value):
        session_id = (candidate or "").strip()
        if session_id:
            return session_id
    return ANONYMOUS_SESSION
