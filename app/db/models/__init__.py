from app.db.models.property import Property
from app.db.models.tenant import Tenant
from app.db.models.lease import Lease
from app.db.models.transaction import Transaction
from app.db.models.maintenance_task import MaintenanceTask

__all__ = ["Property", "Tenant", "Lease", "Transaction", "MaintenanceTask"]
