# clinic_booking/errors.py


class BookingError(Exception):
    """Base class for every failure the identity store or the ledger reports."""

    detail = "Booking request failed"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


# Identity
class MissingFields(BookingError):
    detail = "Please fill in all fields"


class DuplicateEmail(BookingError):
    detail = "Email already registered"


class InvalidCredentials(BookingError):
    detail = "Invalid credentials"


# Ledger
class InvalidSlot(BookingError):
    detail = "Time is not one of the clinic's slots"


class WeekendNotAllowed(BookingError):
    detail = "Appointments can only be booked Monday to Friday"


class SlotUnavailable(BookingError):
    detail = "Slot is not available"


class DailyLimitExceeded(BookingError):
    detail = "Daily appointment limit reached"


class AppointmentNotFound(BookingError):
    detail = "Appointment not found"
