"""Rotas HTTP: healthcheck e booking IDs da sessão corrente."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from firestore_sessions.api.dependencies import get_session_store, get_settings
from firestore_sessions.config.settings import Settings
from firestore_sessions.domain.booking import (
    BOOKING_IDS_KEY,
    add_booking_id,
    extract_booking_ids,
)
from firestore_sessions.infra.session_contract import SessionStore
from firestore_sessions.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Healthcheck simples."""
    return {"status": "ok", "service": settings.service_name, "version": settings.version}


@router.get("/bookings")
def list_bookings(
    request: Request,
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
) -> dict[str, list[str]]:
    """Lista os booking IDs da sessão (vazio se não houver)."""
    session = store.get(request, settings.session_cookie_name)
    return {"booking_ids": extract_booking_ids(session) or []}


@router.post("/bookings/{booking_id}")
def add_booking(
    booking_id: str,
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
) -> dict[str, list[str]]:
    """Acrescenta um booking ID à sessão e persiste."""
    session = store.get(request, settings.session_cookie_name)
    booking_ids = add_booking_id(session, booking_id)
    store.save(request, response, session)
    logger.info("Booking added to session", extra={"bookings": len(booking_ids)})
    return {"booking_ids": booking_ids}


@router.delete("/bookings")
def clear_bookings(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
) -> dict[str, list[str]]:
    """Remove todos os booking IDs da sessão."""
    session = store.get(request, settings.session_cookie_name)
    session.values.pop(BOOKING_IDS_KEY, None)
    store.save(request, response, session)
    return {"booking_ids": []}
