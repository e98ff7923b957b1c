# clinic_booking/models.py

from sqlalchemy.types import Text
from sqlmodel import SQLModel, Field, Column


class StoredValue(SQLModel, table=True):
    """One key of the flat store; value is the JSON text written under it."""

    __tablename__ = "stored_values"

    key: str = Field(primary_key=True)
    value: str = Field(sa_column=Column(Text, nullable=False))
