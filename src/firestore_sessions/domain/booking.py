"""Visão tipada dos booking IDs guardados na sessão.

A chave reservada "bookingIds" é opcional: ausência não é erro. Quando
presente, o valor precisa ser exatamente uma lista de strings.
"""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError

from firestore_sessions.domain.errors import NilSessionError, TypeMismatchError
from firestore_sessions.domain.session import Session

BOOKING_IDS_KEY = "bookingIds"

BookingIDs = list[str]

_booking_ids_adapter: TypeAdapter[BookingIDs] = TypeAdapter(BookingIDs)


def _describe(value: Any) -> str:
    if isinstance(value, list):
        item_types = sorted({type(item).__name__ for item in value})
        return f"list[{' | '.join(item_types)}]" if item_types else "list"
    return type(value).__name__


def _validate(value: Any) -> BookingIDs:
    try:
        return _booking_ids_adapter.validate_python(value, strict=True)
    except ValidationError as e:
        raise TypeMismatchError(BOOKING_IDS_KEY, "list[str]", _describe(value)) from e


def extract_booking_ids(session: Session | None) -> BookingIDs | None:
    """Extrai os booking IDs da sessão.

    Returns:
        Lista na ordem armazenada (duplicatas preservadas) ou None se a
        chave não existir.

    Raises:
        NilSessionError: session é None
        TypeMismatchError: valor não é uma lista de strings
    """
    if session is None:
        raise NilSessionError("cannot extract booking IDs from a nil session")

    if BOOKING_IDS_KEY not in session.values:
        return None

    return _validate(session.values[BOOKING_IDS_KEY])


def set_booking_ids(session: Session, booking_ids: BookingIDs) -> None:
    """Grava a lista de booking IDs na sessão (validada)."""
    if session is None:
        raise NilSessionError("cannot store booking IDs in a nil session")
    session.values[BOOKING_IDS_KEY] = list(_validate(booking_ids))


def add_booking_id(session: Session, booking_id: str) -> BookingIDs:
    """Acrescenta um booking ID ao final da lista e retorna a lista nova."""
    booking_ids = extract_booking_ids(session) or []
    booking_ids.append(booking_id)
    set_booking_ids(session, booking_ids)
    return booking_ids
