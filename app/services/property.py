from sqlalchemy.orm import Session

import app.repositories.lease as lease_repo
import app.repositories.maintenance_task as task_repo
import app.repositories.property as property_repo
import app.repositories.transaction as transaction_repo
from app.errors import DomainValidationError, NotFoundError


def delete_property(db: Session, property_id: int) -> None:
    """
    Delete a property with business logic validation.

    - Validates property exists
    - Validates property has no leases, transactions or maintenance tasks
      (history is never dropped implicitly)

    Raises:
        NotFoundError: If property doesn't exist
        DomainValidationError: If anything still references the property
    """
    db_property = property_repo.get_property_by_id(db, property_id)
    if not db_property:
        raise NotFoundError("Property not found")

    if lease_repo.get_leases_by_property_id(db, property_id):
        raise DomainValidationError(
            "Cannot delete property: property has associated leases"
        )

    if transaction_repo.get_transactions_by_property_id(db, property_id):
        raise DomainValidationError(
            "Cannot delete property: property has associated transactions"
        )

    if task_repo.get_tasks_by_property_id(db, property_id):
        raise DomainValidationError(
            "Cannot delete property: property has associated maintenance tasks"
        )

    property_repo.delete_property(db, property_id)
