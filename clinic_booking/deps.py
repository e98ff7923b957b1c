# clinic_booking/deps.py

from fastapi import Depends, HTTPException
from sqlmodel import Session

from .db import get_session
from .errors import (
    AppointmentNotFound,
    BookingError,
    DailyLimitExceeded,
    DuplicateEmail,
    InvalidCredentials,
    InvalidSlot,
    MissingFields,
    SlotUnavailable,
    WeekendNotAllowed,
)
from .identity import IdentityStore
from .ledger import AppointmentLedger, utcnow
from .schemas import UserType
from .storage import KeyValueStore, SqlStore

STATUS_CODES = {
    MissingFields: 422,
    DuplicateEmail: 409,
    InvalidCredentials: 401,
    InvalidSlot: 422,
    WeekendNotAllowed: 422,
    SlotUnavailable: 409,
    DailyLimitExceeded: 409,
    AppointmentNotFound: 404,
}


def http_error(exc: BookingError) -> HTTPException:
    return HTTPException(status_code=STATUS_CODES.get(type(exc), 400), detail=exc.detail)


def get_store(session: Session = Depends(get_session)) -> KeyValueStore:
    return SqlStore(session)


def get_clock():
    return utcnow


def get_identity_store(store: KeyValueStore = Depends(get_store)) -> IdentityStore:
    return IdentityStore(store)


def get_ledger(
    store: KeyValueStore = Depends(get_store),
    clock=Depends(get_clock),
) -> AppointmentLedger:
    return AppointmentLedger(store, now=clock)


def require_role(user, role: UserType):
    if user.type != role.value:
        raise HTTPException(status_code=403, detail="Forbidden")
