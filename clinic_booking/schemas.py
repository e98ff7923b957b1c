# clinic_booking/schemas.py

from datetime import date as Date
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class UserType(str, Enum):
    client = "client"
    admin = "admin"


# Session identity: a registered client record or the admin variant
class ClientUser(BaseModel):
    type: Literal["client"] = "client"
    name: str = ""
    email: str
    phone: str = ""
    password: str


class AdminUser(BaseModel):
    type: Literal["admin"] = "admin"
    username: str


Identity = Annotated[Union[ClientUser, AdminUser], Field(discriminator="type")]
identity_adapter = TypeAdapter(Identity)


class ClientPublic(BaseModel):
    type: Literal["client"] = "client"
    name: str
    email: str
    phone: str


IdentityPublic = Annotated[Union[ClientPublic, AdminUser], Field(discriminator="type")]


class UserCreate(BaseModel):
    # empty fields are reported as MissingFields by the identity store
    name: str = ""
    email: str = ""
    phone: str = ""
    password: str = ""


class AppointmentStatus(str, Enum):
    scheduled = "scheduled"
    cancelled = "cancelled"


class Appointment(BaseModel):
    """Ledger record, persisted and returned with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    client_email: str = Field(alias="clientEmail")
    client_name: str = Field(default="", alias="clientName")
    date: Date
    time: str
    status: AppointmentStatus = AppointmentStatus.scheduled


class AppointmentCreate(BaseModel):
    date: Date
    time: str


class SlotState(str, Enum):
    available = "available"
    taken = "taken"
    past = "past"
    limit_reached = "limit_reached"
    closed = "closed"


class SlotPublic(BaseModel):
    time: str
    state: SlotState


class DaySlotsResponse(BaseModel):
    date: Date
    open: bool
    slots: List[SlotPublic]
    scheduled_by_client: Optional[int] = None
