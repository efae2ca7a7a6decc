from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_today
from app.services.maintenance_task import create_task, delete_task, update_task
import app.repositories.maintenance_task as task_repo
from app.schemas.maintenance_task import (
    MaintenanceTask,
    MaintenanceTaskCreate,
    MaintenanceTaskUpdate,
    TaskPriority,
    TaskStatus,
)
from app.schemas.pagination import PaginatedResponse
from app.errors import NotFoundError

router = APIRouter(prefix="/maintenance-tasks", tags=["maintenance-tasks"])


@router.post("", response_model=MaintenanceTask, status_code=status.HTTP_201_CREATED)
def create_new_task(
    task_data: MaintenanceTaskCreate,
    db: Session = Depends(get_db),
):
    """
    Create a maintenance task for a property.
    """
    task = create_task(db, **task_data.model_dump())
    return MaintenanceTask.model_validate(task)


@router.get("", response_model=PaginatedResponse[MaintenanceTask])
def get_all_tasks(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(100, ge=1, le=1000, description="Number of items per page"),
    property: int | None = Query(None, description="Filter tasks by property ID"),
    task_status: TaskStatus | None = Query(None, alias="status", description="open or completed"),
    priority: TaskPriority | None = Query(None, description="Filter by priority"),
    overdue: bool = Query(False, description="Only open tasks whose due date has passed"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Get all maintenance tasks with pagination and optional filters, newest first.
    """
    tasks, total = task_repo.get_all_tasks_paginated(
        db,
        page=page,
        page_size=page_size,
        property_id=property,
        task_status=task_status.value if task_status else None,
        priority=priority.value if priority else None,
        overdue_as_of=today if overdue else None,
    )
    return PaginatedResponse(
        items=[MaintenanceTask.model_validate(task) for task in tasks],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{task_id}", response_model=MaintenanceTask)
def get_task_by_id(
    task_id: int,
    db: Session = Depends(get_db),
):
    """
    Get a maintenance task by ID.
    """
    task = task_repo.get_task_by_id(db, task_id)
    if not task:
        raise NotFoundError("Maintenance task not found")
    return MaintenanceTask.model_validate(task)


@router.put("/{task_id}", response_model=MaintenanceTask)
def update_task_by_id(
    task_id: int,
    task_data: MaintenanceTaskUpdate,
    db: Session = Depends(get_db),
):
    """
    Update a maintenance task; send {"task_status": "completed"} to complete it.

    Fields not included in the request are not updated.
    """
    update_data = task_data.model_dump(exclude_unset=True)
    task = update_task(db, task_id=task_id, **update_data)
    return MaintenanceTask.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task_by_id(
    task_id: int,
    db: Session = Depends(get_db),
):
    """
    Delete a maintenance task by ID.
    """
    delete_task(db, task_id)
