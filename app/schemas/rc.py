from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from datetime import date, datetime
from typing import Optional


class CamelModel(BaseModel):
    """Wire format is camelCase (rcNumber, vehicleInfo, ...); attributes stay snake_case."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class Owner(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    aadhaar_last4: Optional[str] = None


class VehicleInfo(CamelModel):
    type: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    variant: Optional[str] = None
    fuel_type: Optional[str] = None
    color: Optional[str] = None
    manufacture_year: Optional[int] = None


class RegistrationInfo(CamelModel):
    registration_date: Optional[date] = None
    valid_till: Optional[date] = None
    active: Optional[bool] = None


class Insurance(CamelModel):
    provider: Optional[str] = None
    policy_number: Optional[str] = None
    valid_till: Optional[date] = None


class Puc(CamelModel):
    certificate_number: Optional[str] = None
    valid_till: Optional[date] = None


class RcIn(CamelModel):
    """
    Create/update body. Required fields are checked by rc_validation so the
    client gets '<field> is required' instead of a 422 schema dump.
    owners_count and timestamps are accepted but always recomputed.
    """
    rc_number: Optional[str] = None
    owner: Optional[Owner] = None
    vehicle_info: Optional[VehicleInfo] = None
    registration_info: Optional[RegistrationInfo] = None
    insurance: Optional[Insurance] = None
    puc: Optional[Puc] = None
    chassis_number: Optional[str] = None
    engine_number: Optional[str] = None
    registration_state: Optional[str] = None
    stolen: Optional[bool] = None
    suspicious: Optional[bool] = None
    previous_owners: Optional[list[str]] = None
    owners_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RcOut(CamelModel):
    id: str
    rc_number: str
    owner: Owner
    vehicle_info: VehicleInfo
    registration_info: Optional[RegistrationInfo] = None
    insurance: Optional[Insurance] = None
    puc: Optional[Puc] = None
    chassis_number: str
    engine_number: str
    registration_state: str
    stolen: Optional[bool] = None
    suspicious: Optional[bool] = None
    owners_count: int
    previous_owners: list[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RcPage(CamelModel):
    items: list[RcOut]
    page: int
    size: int
    total: int
    total_pages: int


class MonthlyCount(CamelModel):
    month: str      # YYYY-MM
    count: int


class RcStats(CamelModel):
    total: int
    active_count: int
    stolen_count: int
    suspicious_count: int
    by_state: dict[str, int]
    monthly_verifications: list[MonthlyCount]


class IdentifierCounts(CamelModel):
    chassis_number: Optional[str] = None
    chassis_number_count: Optional[int] = None
    engine_number: Optional[str] = None
    engine_number_count: Optional[int] = None
