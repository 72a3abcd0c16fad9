"""Descriptive metadata for a stored meter."""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class MeterAddress:
    """Postal address of a metering point."""

    line1: str = ""
    line2: str = ""
    line3: str = ""
    post_code: str = ""


@dataclass(frozen=True)
class MeterDetails:
    """Static details of a meter held by the in-memory store."""

    external_id: str
    entity_id: UUID
    site_name: str
    profile_name: str
    address: MeterAddress = field(default_factory=MeterAddress)
    capacity: str = "100"
    energisation_status: str = "Energised"
    energisation_date: date = date(2020, 1, 1)
    supplier_id: str = "SUPPLIER001"
    asset_provider_id: str = "PROVIDER001"
    measurement_class: str = "AI"
    disconnection_date: Optional[date] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["entity_id"] = str(self.entity_id)
        data["energisation_date"] = self.energisation_date.isoformat()
        if self.disconnection_date is not None:
            data["disconnection_date"] = self.disconnection_date.isoformat()
        return data
