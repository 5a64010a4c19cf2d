"""
Required-field checks and write-time normalization shared by create and update.
"""

from app.models.rc import Rc
from app.schemas.rc import RcIn


class RcValidationError(ValueError):
    """A required RC field is missing or blank. Raised before anything is written."""

    def __init__(self, field: str):
        super().__init__(f"{field} is required")
        self.field = field


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_required(body: RcIn) -> None:
    """Raise RcValidationError for the first missing field, checked in a fixed order."""
    owner = body.owner
    vehicle = body.vehicle_info
    checks = (
        ("rcNumber", body.rc_number),
        ("owner.name", owner.name if owner else None),
        ("registrationState", body.registration_state),
        ("vehicleInfo.make", vehicle.make if vehicle else None),
        ("vehicleInfo.model", vehicle.model if vehicle else None),
        ("chassisNumber", body.chassis_number),
        ("engineNumber", body.engine_number),
    )
    for field, value in checks:
        if _blank(value):
            raise RcValidationError(field)


def _section(model):
    return model.model_dump(mode="json") if model is not None else None


def build_record(body: RcIn, rc_id: str = None) -> Rc:
    """
    Map a validated body onto a detached Rc row.
    owners_count is derived from previous_owners; any client value is overwritten.
    Timestamps are left for the caller to set.
    """
    previous_owners = list(body.previous_owners) if body.previous_owners is not None else []
    return Rc(
        id=rc_id,
        rc_number=body.rc_number,
        owner=_section(body.owner),
        vehicle_info=_section(body.vehicle_info),
        registration_info=_section(body.registration_info),
        insurance=_section(body.insurance),
        puc=_section(body.puc),
        chassis_number=body.chassis_number,
        engine_number=body.engine_number,
        registration_state=body.registration_state,
        stolen=body.stolen,
        suspicious=body.suspicious,
        previous_owners=previous_owners,
        owners_count=1 + len(previous_owners),
    )
