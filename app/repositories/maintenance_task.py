from datetime import date

from sqlalchemy.orm import Session

from app.db.models.maintenance_task import MaintenanceTask as MaintenanceTaskModel
from app.errors import NotFoundError


def get_task_by_id(db: Session, task_id: int) -> MaintenanceTaskModel | None:
    """Get a maintenance task by ID."""
    return db.query(MaintenanceTaskModel).filter(MaintenanceTaskModel.id == task_id).first()


def get_tasks_by_property_id(db: Session, property_id: int) -> list[MaintenanceTaskModel]:
    """Get all maintenance tasks for a specific property."""
    return (
        db.query(MaintenanceTaskModel)
        .filter(MaintenanceTaskModel.property_id == property_id)
        .all()
    )


def get_all_tasks_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    property_id: int | None = None,
    task_status: str | None = None,
    priority: str | None = None,
    overdue_as_of: date | None = None,
) -> tuple[list[MaintenanceTaskModel], int]:
    """
    Get maintenance tasks with pagination and optional filters, newest first.

    Args:
        overdue_as_of: When given, only open tasks whose due date is before
                       this date are returned.

    Returns:
        Tuple of (list of tasks, total count)
    """
    query = db.query(MaintenanceTaskModel)

    if property_id is not None:
        query = query.filter(MaintenanceTaskModel.property_id == property_id)

    if task_status is not None:
        query = query.filter(MaintenanceTaskModel.task_status == task_status)

    if priority is not None:
        query = query.filter(MaintenanceTaskModel.priority == priority)

    if overdue_as_of is not None:
        query = query.filter(
            MaintenanceTaskModel.task_status == "open",
            MaintenanceTaskModel.due_date.isnot(None),
            MaintenanceTaskModel.due_date < overdue_as_of,
        )

    total = query.count()
    skip = (page - 1) * page_size
    tasks = (
        query.order_by(MaintenanceTaskModel.created_at.desc(), MaintenanceTaskModel.id.desc())
        .offset(skip)
        .limit(page_size)
        .all()
    )
    return tasks, total


def create_task(db: Session, **fields) -> MaintenanceTaskModel:
    """Create a new maintenance task in the database. Pure data access - no business logic."""
    db_task = MaintenanceTaskModel(**fields)
    db.add(db_task)
    db.commit()
    db.refresh(db_task)
    return db_task


def update_task(db: Session, task_id: int, **kwargs) -> MaintenanceTaskModel:
    """Update a maintenance task. Only updates fields that are explicitly provided."""
    db_task = get_task_by_id(db, task_id)
    if not db_task:
        raise NotFoundError("Maintenance task not found")

    for name, value in kwargs.items():
        setattr(db_task, name, value)

    db.commit()
    db.refresh(db_task)
    return db_task


def delete_task(db: Session, task_id: int) -> None:
    """Delete a maintenance task from the database. Pure data access - no business logic."""
    db_task = get_task_by_id(db, task_id)
    if not db_task:
        raise NotFoundError("Maintenance task not found")

    db.delete(db_task)
    db.commit()
