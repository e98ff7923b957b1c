# clinic_booking/ledger.py

import logging
import uuid
from datetime import datetime, timedelta, timezone, date
from typing import Callable, List, Optional

from .config import settings
from .data import APPOINTMENTS_KEY, TIME_SLOTS, clinic_settings
from .errors import (
    AppointmentNotFound,
    DailyLimitExceeded,
    InvalidSlot,
    SlotUnavailable,
    WeekendNotAllowed,
)
from .schemas import (
    Appointment,
    AppointmentStatus,
    ClientUser,
    DaySlotsResponse,
    SlotPublic,
    SlotState,
)
from .storage import KeyValueStore, write_lock

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AppointmentLedger:
    def __init__(
        self,
        store: KeyValueStore,
        now: Optional[Callable[[], datetime]] = None,
        max_daily: Optional[int] = None,
        utc_offset_hours: Optional[int] = None,
    ):
        self.store = store
        self.now = now or utcnow
        self.max_daily = settings.max_daily_appointments if max_daily is None else max_daily
        if utc_offset_hours is None:
            utc_offset_hours = settings.clinic_utc_offset_hours
        self.clinic_tz = timezone(timedelta(hours=utc_offset_hours))

    # -- persistence -------------------------------------------------------

    def appointments(self) -> List[Appointment]:
        return [Appointment.model_validate(a) for a in self.store.read_json(APPOINTMENTS_KEY, [])]

    def _save(self, appointments: List[Appointment]) -> None:
        self.store.write_json(
            APPOINTMENTS_KEY,
            [a.model_dump(mode="json", by_alias=True) for a in appointments],
        )

    def get(self, appointment_id: str) -> Appointment:
        for a in self.appointments():
            if a.id == appointment_id:
                return a
        raise AppointmentNotFound()

    # -- predicates --------------------------------------------------------

    @staticmethod
    def is_weekday(on_date: date) -> bool:
        return on_date.weekday() in clinic_settings["working_days"]

    def slot_start(self, on_date: date, time: str) -> datetime:
        if time not in TIME_SLOTS:
            raise InvalidSlot()
        clock = datetime.strptime(time, clinic_settings["time_format"]).time()
        return datetime.combine(on_date, clock, tzinfo=self.clinic_tz)

    def is_past(self, on_date: date, time: str) -> bool:
        return self.slot_start(on_date, time) < self.now()

    def is_taken(self, on_date: date, time: str, appointments: Optional[List[Appointment]] = None) -> bool:
        if appointments is None:
            appointments = self.appointments()
        return any(
            a.date == on_date and a.time == time and a.status == AppointmentStatus.scheduled
            for a in appointments
        )

    def is_available(self, on_date: date, time: str, appointments: Optional[List[Appointment]] = None) -> bool:
        """Free slot that has not started yet. Weekday and per-client cap are checked separately."""
        if self.is_past(on_date, time):
            return False
        return not self.is_taken(on_date, time, appointments)

    def scheduled_count(self, on_date: date, client_email: str, appointments: Optional[List[Appointment]] = None) -> int:
        if appointments is None:
            appointments = self.appointments()
        return sum(
            1
            for a in appointments
            if a.date == on_date and a.client_email == client_email and a.status == AppointmentStatus.scheduled
        )

    # -- mutations ---------------------------------------------------------

    def book(self, on_date: date, time: str, client: ClientUser) -> Appointment:
        # 1) Slot label and weekday do not depend on stored state
        self.slot_start(on_date, time)
        if not self.is_weekday(on_date):
            raise WeekendNotAllowed()

        with write_lock:
            # 2) Re-read at confirmation time; what the client saw may be stale
            appointments = self.appointments()

            # 3) Per-client daily cap
            if self.scheduled_count(on_date, client.email, appointments) >= self.max_daily:
                logger.warning(
                    "ledger.daily_limit",
                    extra={"client_email": client.email, "date": on_date.isoformat()},
                )
                raise DailyLimitExceeded()

            # 4) Slot still free and in the future
            if self.is_past(on_date, time):
                raise SlotUnavailable("Slot has already started")
            if self.is_taken(on_date, time, appointments):
                logger.warning(
                    "ledger.slot_taken",
                    extra={"date": on_date.isoformat(), "time": time},
                )
                raise SlotUnavailable()

            # 5) Append and persist the whole collection
            new_appt = Appointment(
                id=uuid.uuid4().hex,
                client_email=client.email,
                client_name=client.name,
                date=on_date,
                time=time,
                status=AppointmentStatus.scheduled,
            )
            appointments.append(new_appt)
            self._save(appointments)

        logger.info(
            "ledger.booked",
            extra={"appointment_id": new_appt.id, "date": on_date.isoformat(), "time": time},
        )
        return new_appt

    def cancel(self, appointment_id: str) -> Appointment:
        with write_lock:
            appointments = self.appointments()
            target = None
            for a in appointments:
                if a.id == appointment_id:
                    target = a
                    break
            if target is None:
                raise AppointmentNotFound()

            # cancelling twice is not an error
            if target.status == AppointmentStatus.cancelled:
                return target

            target.status = AppointmentStatus.cancelled
            self._save(appointments)

        logger.info("ledger.cancelled", extra={"appointment_id": appointment_id})
        return target

    # -- views -------------------------------------------------------------

    def client_appointments(self, client_email: str) -> List[Appointment]:
        return [
            a
            for a in self.appointments()
            if a.client_email == client_email and a.status == AppointmentStatus.scheduled
        ]

    def scheduled_appointments(self) -> List[Appointment]:
        scheduled = [a for a in self.appointments() if a.status == AppointmentStatus.scheduled]
        return sorted(scheduled, key=lambda a: (a.date, a.time))

    def day_slots(self, on_date: date, client_email: Optional[str] = None) -> DaySlotsResponse:
        if not self.is_weekday(on_date):
            return DaySlotsResponse(
                date=on_date,
                open=False,
                slots=[SlotPublic(time=t, state=SlotState.closed) for t in TIME_SLOTS],
            )

        appointments = self.appointments()
        count = None
        limit_reached = False
        if client_email is not None:
            count = self.scheduled_count(on_date, client_email, appointments)
            limit_reached = count >= self.max_daily

        slots = []
        for t in TIME_SLOTS:
            if self.is_taken(on_date, t, appointments):
                state = SlotState.taken
            elif self.is_past(on_date, t):
                state = SlotState.past
            elif limit_reached:
                state = SlotState.limit_reached
            else:
                state = SlotState.available
            slots.append(SlotPublic(time=t, state=state))

        return DaySlotsResponse(date=on_date, open=True, slots=slots, scheduled_by_client=count)
