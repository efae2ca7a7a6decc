from datetime import date

from sqlalchemy.orm import Session

from app.db.models.maintenance_task import MaintenanceTask as MaintenanceTaskModel
from app.db.models.property import Property as PropertyModel


def create_task(client, property_id: int, **fields) -> dict:
    payload = {"property_id": property_id, "title": "Fix leaking tap"}
    payload.update(fields)
    response = client.post("/api/v1/maintenance-tasks", json=payload)
    assert response.status_code == 201
    return response.json()


# ============================================================================
# CREATE TASK TESTS
# ============================================================================


def test_create_task_success(client, db: Session, property_):
    """Test successful maintenance task creation."""
    response = client.post(
        "/api/v1/maintenance-tasks",
        json={
            "property_id": property_.id,
            "title": "Service boiler",
            "description": "Annual check",
            "due_date": "2024-09-01",
            "priority": "high",
            "assigned_to": "Heat & Co",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["property_id"] == property_.id
    assert data["title"] == "Service boiler"
    assert data["due_date"] == "2024-09-01"
    assert data["priority"] == "high"
    assert data["task_status"] == "open"
    assert data["assigned_to"] == "Heat & Co"


def test_create_task_minimal_fields(client, db: Session, property_):
    """Test a task needs only a property and a title."""
    data = create_task(client, property_.id)
    assert data["priority"] is None
    assert data["due_date"] is None
    assert data["task_status"] == "open"


def test_create_task_invalid_priority(client, db: Session, property_):
    """Test an unknown priority is rejected."""
    response = client.post(
        "/api/v1/maintenance-tasks",
        json={"property_id": property_.id, "title": "Paint fence", "priority": "urgent"},
    )
    assert response.status_code == 422


def test_create_task_empty_title(client, db: Session, property_):
    """Test the title cannot be empty."""
    response = client.post("/api/v1/maintenance-tasks", json={"property_id": property_.id, "title": ""})
    assert response.status_code == 422


def test_create_task_property_not_found(client, db: Session):
    """Test creating a task for a missing property."""
    response = client.post("/api/v1/maintenance-tasks", json={"property_id": 99999, "title": "Paint fence"})
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


# ============================================================================
# GET / LIST TASK TESTS
# ============================================================================


def test_list_tasks_newest_first(client, db: Session, property_, other_property):
    """Test tasks are listed newest first and filtered by property."""
    first = create_task(client, property_.id, title="Clean gutters")
    second = create_task(client, property_.id, title="Replace smoke alarm")
    create_task(client, other_property.id, title="Fix intercom")

    response = client.get(f"/api/v1/maintenance-tasks?property={property_.id}")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert [item["id"] for item in data["items"]] == [second["id"], first["id"]]


def test_list_tasks_filter_by_status_and_priority(client, db: Session, property_):
    """Test the status and priority filters."""
    high = create_task(client, property_.id, title="Roof leak", priority="high")
    low = create_task(client, property_.id, title="Oil hinges", priority="low")
    create_task(client, property_.id, title="Old job", priority="high", task_status="completed")

    response = client.get("/api/v1/maintenance-tasks?status=open")
    assert {item["id"] for item in response.json()["items"]} == {high["id"], low["id"]}

    response = client.get("/api/v1/maintenance-tasks?status=open&priority=high")
    assert [item["id"] for item in response.json()["items"]] == [high["id"]]


def test_list_tasks_overdue(client, db: Session, property_, set_today):
    """Test overdue lists open tasks whose due date has passed."""
    late = create_task(client, property_.id, title="Late", due_date="2024-06-30")
    create_task(client, property_.id, title="Due today", due_date="2024-07-01")
    create_task(client, property_.id, title="No due date")
    create_task(client, property_.id, title="Done", due_date="2024-06-01", task_status="completed")

    response = client.get("/api/v1/maintenance-tasks?overdue=true")
    assert [item["id"] for item in response.json()["items"]] == [late["id"]]

    set_today(date(2024, 7, 2))
    response = client.get("/api/v1/maintenance-tasks?overdue=true")
    assert response.json()["total"] == 2


def test_get_task_not_found(client, db: Session):
    """Test getting a missing task."""
    response = client.get("/api/v1/maintenance-tasks/99999")
    assert response.status_code == 404
    assert response.json() == {"detail": "Maintenance task not found", "code": "NOT_FOUND"}


# ============================================================================
# UPDATE TASK TESTS
# ============================================================================


def test_complete_task(client, db: Session, property_):
    """Test completing a task through a partial update."""
    task = create_task(client, property_.id, priority="medium")

    response = client.put(f"/api/v1/maintenance-tasks/{task['id']}", json={"task_status": "completed"})
    assert response.status_code == 200
    data = response.json()
    assert data["task_status"] == "completed"
    assert data["priority"] == "medium"
    assert data["title"] == "Fix leaking tap"


def test_update_task_clear_due_date(client, db: Session, property_):
    """Test optional fields can be cleared."""
    task = create_task(client, property_.id, due_date="2024-08-01")

    response = client.put(f"/api/v1/maintenance-tasks/{task['id']}", json={"due_date": None})
    assert response.status_code == 200
    assert response.json()["due_date"] is None


def test_update_task_null_title_fails(client, db: Session, property_):
    """Test the title cannot be cleared."""
    task = create_task(client, property_.id)

    response = client.put(f"/api/v1/maintenance-tasks/{task['id']}", json={"title": None})
    assert response.status_code == 422


def test_update_task_move_to_missing_property(client, db: Session, property_):
    """Test moving a task to a missing property."""
    task = create_task(client, property_.id)

    response = client.put(f"/api/v1/maintenance-tasks/{task['id']}", json={"property_id": 99999})
    assert response.status_code == 404


def test_update_task_not_found(client, db: Session):
    """Test updating a missing task."""
    response = client.put("/api/v1/maintenance-tasks/99999", json={"title": "Anything"})
    assert response.status_code == 404


# ============================================================================
# DELETE TASK TESTS
# ============================================================================


def test_delete_task(client, db: Session, property_):
    """Test deleting a task."""
    task = create_task(client, property_.id)

    response = client.delete(f"/api/v1/maintenance-tasks/{task['id']}")
    assert response.status_code == 204
    assert db.query(MaintenanceTaskModel).count() == 0


def test_delete_task_not_found(client, db: Session):
    """Test deleting a missing task."""
    response = client.delete("/api/v1/maintenance-tasks/99999")
    assert response.status_code == 404


def test_delete_property_with_tasks_fails(client, db: Session, property_):
    """Test a property with maintenance tasks cannot be deleted."""
    create_task(client, property_.id)

    response = client.delete(f"/api/v1/properties/{property_.id}")
    assert response.status_code == 400
    assert "associated maintenance tasks" in response.json()["detail"]
    assert db.query(PropertyModel).count() == 1
