"""Shared builders for RC test data."""

from datetime import datetime, timezone
from app.models.rc import Rc
from app.schemas.rc import RcIn


def make_body(**overrides) -> RcIn:
    payload = {
        "rcNumber": "KA01AB1234",
        "owner": {"name": "John Buyer", "email": "john@example.com", "phone": "9876543210"},
        "vehicleInfo": {"type": "Car", "make": "Maruti", "model": "Swift", "manufactureYear": 2021},
        "registrationInfo": {"registrationDate": "2021-01-05", "validTill": "2036-01-04", "active": True},
        "chassisNumber": "CHS123456789",
        "engineNumber": "ENG987654321",
        "registrationState": "KA",
        "stolen": False,
        "suspicious": False,
    }
    payload.update(overrides)
    return RcIn.model_validate(payload)


def make_rc(rc_id="rc-1", rc_number="KA01AB1234", owner_name="John Buyer", state="KA",
            make="Maruti", stolen=False, suspicious=False, active=True, created_at=None,
            email="john@example.com", previous_owners=None) -> Rc:
    previous_owners = previous_owners or []
    return Rc(
        id=rc_id,
        rc_number=rc_number,
        owner={"name": owner_name, "email": email} if owner_name is not None else {},
        vehicle_info={"make": make, "model": "Swift"} if make is not None else {"model": "Swift"},
        registration_info={"active": active},
        chassis_number="CHS-" + rc_number,
        engine_number="ENG-" + rc_number,
        registration_state=state,
        stolen=stolen,
        suspicious=suspicious,
        previous_owners=previous_owners,
        owners_count=1 + len(previous_owners),
        created_at=created_at or datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
        updated_at=created_at or datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
    )
