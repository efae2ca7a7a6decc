from sqlalchemy.orm import Session

import app.repositories.lease as lease_repo
import app.repositories.tenant as tenant_repo
from app.errors import DomainValidationError, NotFoundError


def delete_tenant(db: Session, tenant_id: int) -> None:
    """
    Delete a tenant with business logic validation.

    - Validates tenant exists
    - Validates tenant is not on any lease

    Raises:
        NotFoundError: If tenant doesn't exist
        DomainValidationError: If tenant has leases
    """
    tenant = tenant_repo.get_tenant_by_id(db, tenant_id)
    if not tenant:
        raise NotFoundError("Tenant not found")

    leases = lease_repo.get_leases_by_tenant_id(db, tenant_id)
    if leases:
        raise DomainValidationError(
            "Cannot delete tenant: tenant has associated leases"
        )

    tenant_repo.delete_tenant(db, tenant_id)
