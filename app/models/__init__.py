# SmartVehicle RC Registry — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.rc import Rc                                # noqa
from app.models.ownership_history import OwnershipHistory   # noqa
