"""Camada de domínio — tipos de sessão, erros e booking IDs.

Não conhece Firestore nem HTTP.
"""

from firestore_sessions.domain.booking import (
    BOOKING_IDS_KEY,
    BookingIDs,
    add_booking_id,
    extract_booking_ids,
    set_booking_ids,
)
from firestore_sessions.domain.errors import (
    DecodingError,
    EncodingError,
    MaxLengthExceededError,
    NilSessionError,
    PersistenceError,
    SerializationError,
    SessionError,
    TypeMismatchError,
)
from firestore_sessions.domain.session import CookieOptions, Session, SessionValue, SessionValues

__all__ = [
    # Sessão
    "Session",
    "SessionValue",
    "SessionValues",
    "CookieOptions",
    # Booking IDs
    "BOOKING_IDS_KEY",
    "BookingIDs",
    "extract_booking_ids",
    "set_booking_ids",
    "add_booking_id",
    # Erros
    "SessionError",
    "SerializationError",
    "EncodingError",
    "DecodingError",
    "MaxLengthExceededError",
    "PersistenceError",
    "NilSessionError",
    "TypeMismatchError",
]
