# clinic_booking/routers/appointments_routes.py

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from clinic_booking.auth import get_current_admin, get_current_client, get_current_user
from clinic_booking.deps import get_ledger, http_error
from clinic_booking.errors import BookingError
from clinic_booking.ledger import AppointmentLedger
from clinic_booking.schemas import (
    Appointment,
    AppointmentCreate,
    ClientUser,
    DaySlotsResponse,
)

router = APIRouter(
    tags=["appointments"],
)


@router.get("/slots", response_model=DaySlotsResponse)
def day_slots(
    on_date: date,
    ledger: AppointmentLedger = Depends(get_ledger),
    current_user=Depends(get_current_user),
):
    # Clients also see where their own daily limit blocks them
    client_email = current_user.email if current_user.type == "client" else None
    return ledger.day_slots(on_date, client_email=client_email)


@router.post("/appointments", response_model=Appointment, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    ledger: AppointmentLedger = Depends(get_ledger),
    current_client: ClientUser = Depends(get_current_client),
):
    try:
        return ledger.book(appt.date, appt.time, current_client)
    except BookingError as exc:
        raise http_error(exc)


@router.patch("/appointments/{appt_id}/cancel", response_model=Appointment)
def cancel_appointment(
    appt_id: str,
    ledger: AppointmentLedger = Depends(get_ledger),
    current_client: ClientUser = Depends(get_current_client),
):
    try:
        # 1) Find the appointment
        target = ledger.get(appt_id)

        # 2) Clients may only cancel their own
        if target.client_email != current_client.email:
            raise HTTPException(status_code=403, detail="Forbidden")

        # 3) Cancel and persist
        return ledger.cancel(appt_id)
    except BookingError as exc:
        raise http_error(exc)


@router.get("/clients/me/appointments", response_model=List[Appointment])
def list_my_appointments(
    ledger: AppointmentLedger = Depends(get_ledger),
    current_client: ClientUser = Depends(get_current_client),
):
    return ledger.client_appointments(current_client.email)


@router.get("/admin/appointments", response_model=List[Appointment])
def list_all_appointments(
    ledger: AppointmentLedger = Depends(get_ledger),
    current_admin=Depends(get_current_admin),
):
    return ledger.scheduled_appointments()
