from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException, Request

from api.config import SESSION_COOKIE
from api.core.deck import DeckResponse
from api.core.errors import UpstreamFetchError
from api.core.pipeline import build_deck
from api.core.user_utils import parse_deck_request, resolve_session_id

router = APIRouter(tags=["deck"])
logger = logging.getLogger(__name__)


@router.post("/deck", response_model=DeckResponse)
async def post_deck(
    request: Request,
    x_session_id: str | None = Header(None, description="Stable session id"),
):
    """Build a deck of up to ten picks for the query and the session's feedback."""
    source = getattr(request.app.state, "catalog", None)
    if source is None:
        raise HTTPException(status_code=503, detail="Catalog not configured")

    body = parse_deck_request(await request.body())
    session_id = resolve_session_id(x_session_id, request.cookies.get(SESSION_COOKIE))
    try:
        return await build_deck(source, body, session_id)
    except UpstreamFetchError as exc:
        logger.error("Deck request failed: %s", exc)
        raise HTTPException(status_code=502, detail="Catalog unavailable") from exc
