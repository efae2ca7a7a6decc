import logging
from datetime import date

from sqlalchemy.orm import Session

import app.repositories.maintenance_task as task_repo
import app.repositories.property as property_repo
from app.db.models.maintenance_task import MaintenanceTask as MaintenanceTaskModel
from app.errors import NotFoundError
from app.schemas.maintenance_task import TaskPriority, TaskStatus

logger = logging.getLogger(__name__)


def _require_property(db: Session, property_id: int) -> None:
    if not property_repo.get_property_by_id(db, property_id):
        raise NotFoundError(f"Property with id {property_id} not found")


def create_task(
    db: Session,
    property_id: int,
    title: str,
    description: str | None = None,
    due_date: date | None = None,
    priority: str | None = None,
    task_status: str = TaskStatus.OPEN.value,
    assigned_to: str | None = None,
) -> MaintenanceTaskModel:
    """
    Create a maintenance task for a property.

    Raises:
        NotFoundError: If property doesn't exist
    """
    _require_property(db, property_id)

    task = task_repo.create_task(
        db,
        property_id=property_id,
        title=title,
        description=description,
        due_date=due_date,
        priority=TaskPriority(priority).value if priority is not None else None,
        task_status=TaskStatus(task_status).value,
        assigned_to=assigned_to,
    )
    logger.info("Created maintenance task %s for property %s", task.id, property_id)
    return task


def update_task(db: Session, task_id: int, **update_fields) -> MaintenanceTaskModel:
    """
    Update a maintenance task. Completing or reopening a task is a task_status update.

    Raises:
        NotFoundError: If the task, or a newly given property, doesn't exist
    """
    existing = task_repo.get_task_by_id(db, task_id)
    if not existing:
        raise NotFoundError("Maintenance task not found")

    property_id = update_fields.get("property_id")
    if property_id is not None and property_id != existing.property_id:
        _require_property(db, property_id)

    task = task_repo.update_task(db, task_id=task_id, **update_fields)
    logger.info("Updated maintenance task %s (%s)", task_id, ", ".join(sorted(update_fields)))
    return task


def delete_task(db: Session, task_id: int) -> None:
    """Delete a maintenance task. Raises NotFoundError if it doesn't exist."""
    task_repo.delete_task(db, task_id)
    logger.info("Deleted maintenance task %s", task_id)
