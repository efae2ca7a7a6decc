import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.orm import Session

from app.db.models.lease import Lease as LeaseModel
from app.db.models.property import Property as PropertyModel
from app.db.models.transaction import Transaction as TransactionModel


def transaction_payload(property_id: int, **overrides) -> dict:
    payload = {
        "property_id": property_id,
        "transaction_date": "2024-02-01",
        "amount": "1200",
        "transaction_type": "income",
        "category": "rent",
    }
    payload.update(overrides)
    return payload


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture(scope="function")
def make_transaction(db: Session):
    """Insert a transaction directly through the repository."""
    from app.repositories.transaction import create_transaction

    def _make(property_id: int, transaction_date: date, amount: str, transaction_type: str, **fields):
        values = {"currency": "USD", "category": "other"}
        values.update(fields)
        return create_transaction(
            db,
            property_id=property_id,
            transaction_date=transaction_date,
            amount=Decimal(amount),
            transaction_type=transaction_type,
            **values,
        )

    return _make


# ============================================================================
# CREATE TRANSACTION TESTS
# ============================================================================


def test_create_transaction_success(client, db: Session, property_, make_lease):
    """Test recording rent against a lease."""
    lease = make_lease(property_.id, date(2024, 1, 1), date(2024, 12, 31))

    response = client.post(
        "/api/v1/transactions",
        json=transaction_payload(property_.id, lease_id=lease.id, description="February rent"),
    )
    assert response.status_code == 201
    data = response.json()
    assert data["property_id"] == property_.id
    assert data["lease_id"] == lease.id
    assert data["transaction_date"] == "2024-02-01"
    assert Decimal(data["amount"]) == Decimal("1200")
    assert data["transaction_type"] == "income"
    assert data["category"] == "rent"
    assert data["description"] == "February rent"


def test_create_transaction_defaults_to_property_currency(client, db: Session, other_property):
    """Test the currency falls back to the property's currency."""
    response = client.post(
        "/api/v1/transactions",
        json=transaction_payload(other_property.id, transaction_type="expense", category="utilities"),
    )
    assert response.status_code == 201
    assert response.json()["currency"] == "EUR"


def test_create_transaction_default_category(client, db: Session, property_):
    """Test the category defaults to other."""
    payload = transaction_payload(property_.id)
    del payload["category"]

    response = client.post("/api/v1/transactions", json=payload)
    assert response.status_code == 201
    assert response.json()["category"] == "other"


@pytest.mark.parametrize("amount", ["0", "-10"])
def test_create_transaction_non_positive_amount(client, db: Session, property_, amount):
    """Test amounts must be positive."""
    response = client.post("/api/v1/transactions", json=transaction_payload(property_.id, amount=amount))
    assert response.status_code == 422


def test_create_transaction_invalid_type(client, db: Session, property_):
    """Test an unknown transaction type is rejected."""
    response = client.post(
        "/api/v1/transactions", json=transaction_payload(property_.id, transaction_type="refund")
    )
    assert response.status_code == 422


def test_create_transaction_invalid_category(client, db: Session, property_):
    """Test an unknown category is rejected."""
    response = client.post("/api/v1/transactions", json=transaction_payload(property_.id, category="food"))
    assert response.status_code == 422


def test_create_transaction_property_not_found(client, db: Session):
    """Test recording a transaction for a missing property."""
    response = client.post("/api/v1/transactions", json=transaction_payload(99999))
    assert response.status_code == 404


def test_create_transaction_lease_not_found(client, db: Session, property_):
    """Test recording a transaction against a missing lease."""
    response = client.post("/api/v1/transactions", json=transaction_payload(property_.id, lease_id=99999))
    assert response.status_code == 404
    assert "Lease with id 99999 not found" in response.json()["detail"]


def test_create_transaction_lease_of_other_property(
    client, db: Session, property_, other_property, make_lease
):
    """Test the lease must belong to the transaction's property."""
    lease = make_lease(other_property.id, date(2024, 1, 1), date(2024, 12, 31))

    response = client.post("/api/v1/transactions", json=transaction_payload(property_.id, lease_id=lease.id))
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert db.query(TransactionModel).count() == 0


# ============================================================================
# GET / LIST TRANSACTION TESTS
# ============================================================================


def test_list_transactions_newest_first_with_filters(
    client, db: Session, property_, other_property, make_transaction
):
    """Test ordering and the property, type and date filters."""
    january = make_transaction(property_.id, date(2024, 1, 1), "1200", "income", category="rent")
    february = make_transaction(property_.id, date(2024, 2, 1), "1200", "income", category="rent")
    repair = make_transaction(property_.id, date(2024, 2, 10), "300", "expense", category="maintenance")
    make_transaction(other_property.id, date(2024, 2, 1), "900", "income")

    def ids(query: str) -> list[int]:
        return [item["id"] for item in client.get(f"/api/v1/transactions?{query}").json()["items"]]

    assert ids(f"property={property_.id}") == [repair.id, february.id, january.id]
    assert ids(f"property={property_.id}&transaction_type=income") == [february.id, january.id]
    assert ids(f"property={property_.id}&category=maintenance") == [repair.id]
    assert ids(f"property={property_.id}&date_from=2024-02-01&date_to=2024-02-01") == [february.id]


def test_list_transactions_filter_by_lease(client, db: Session, property_, make_lease, make_transaction):
    """Test filtering transactions by lease."""
    lease = make_lease(property_.id, date(2024, 1, 1), date(2024, 12, 31))
    rent = make_transaction(property_.id, date(2024, 1, 1), "1200", "income", lease_id=lease.id)
    make_transaction(property_.id, date(2024, 1, 5), "80", "expense")

    response = client.get(f"/api/v1/transactions?lease={lease.id}")
    assert response.json()["total"] == 1
    assert response.json()["items"][0]["id"] == rent.id


def test_get_transaction_not_found(client, db: Session):
    """Test getting a missing transaction."""
    response = client.get("/api/v1/transactions/99999")
    assert response.status_code == 404
    assert response.json() == {"detail": "Transaction not found", "code": "NOT_FOUND"}


# ============================================================================
# UPDATE / DELETE TRANSACTION TESTS
# ============================================================================


def test_update_transaction_partial_update(client, db: Session, property_, make_transaction):
    """Test only provided fields are updated."""
    transaction = make_transaction(property_.id, date(2024, 1, 1), "1200", "income", category="rent")

    response = client.put(f"/api/v1/transactions/{transaction.id}", json={"amount": "1250.75"})
    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["amount"]) == Decimal("1250.75")
    assert data["category"] == "rent"


def test_update_transaction_lease_of_other_property(
    client, db: Session, property_, other_property, make_lease, make_transaction
):
    """Test attaching a lease of another property is rejected."""
    transaction = make_transaction(property_.id, date(2024, 1, 1), "1200", "income")
    lease = make_lease(other_property.id, date(2024, 1, 1), date(2024, 12, 31))

    response = client.put(f"/api/v1/transactions/{transaction.id}", json={"lease_id": lease.id})
    assert response.status_code == 400


def test_update_transaction_move_away_from_its_lease(
    client, db: Session, property_, other_property, make_lease, make_transaction
):
    """Test moving a transaction to another property while keeping its lease is rejected."""
    lease = make_lease(property_.id, date(2024, 1, 1), date(2024, 12, 31))
    transaction = make_transaction(property_.id, date(2024, 1, 1), "1200", "income", lease_id=lease.id)

    response = client.put(
        f"/api/v1/transactions/{transaction.id}", json={"property_id": other_property.id}
    )
    assert response.status_code == 400

    response = client.put(
        f"/api/v1/transactions/{transaction.id}",
        json={"property_id": other_property.id, "lease_id": None},
    )
    assert response.status_code == 200
    assert response.json()["lease_id"] is None


def test_update_transaction_null_amount_fails(client, db: Session, property_, make_transaction):
    """Test required fields cannot be cleared."""
    transaction = make_transaction(property_.id, date(2024, 1, 1), "1200", "income")

    response = client.put(f"/api/v1/transactions/{transaction.id}", json={"amount": None})
    assert response.status_code == 422


def test_delete_transaction(client, db: Session, property_, make_transaction):
    """Test deleting a transaction."""
    transaction = make_transaction(property_.id, date(2024, 1, 1), "1200", "income")

    response = client.delete(f"/api/v1/transactions/{transaction.id}")
    assert response.status_code == 204
    assert db.query(TransactionModel).count() == 0


def test_delete_transaction_not_found(client, db: Session):
    """Test deleting a missing transaction."""
    response = client.delete("/api/v1/transactions/99999")
    assert response.status_code == 404


def test_delete_lease_with_transactions_fails(client, db: Session, property_, make_lease, make_transaction):
    """Test a lease with recorded transactions cannot be deleted."""
    lease = make_lease(property_.id, date(2024, 1, 1), date(2024, 12, 31))
    make_transaction(property_.id, date(2024, 1, 1), "1200", "income", lease_id=lease.id)

    response = client.delete(f"/api/v1/leases/{lease.id}")
    assert response.status_code == 400
    assert "associated transactions" in response.json()["detail"]
    assert db.query(LeaseModel).count() == 1


def test_delete_property_with_transactions_fails(client, db: Session, property_, make_transaction):
    """Test a property with recorded transactions cannot be deleted."""
    make_transaction(property_.id, date(2024, 1, 1), "80", "expense")

    response = client.delete(f"/api/v1/properties/{property_.id}")
    assert response.status_code == 400
    assert "associated transactions" in response.json()["detail"]
    assert db.query(PropertyModel).count() == 1


# ============================================================================
# FINANCIAL SUMMARY TESTS
# ============================================================================


@pytest.fixture(scope="function")
def first_quarter(property_, make_transaction):
    """Three months of activity on property_, plus one EUR refund."""
    make_transaction(property_.id, date(2024, 1, 1), "1200", "income", category="rent")
    make_transaction(property_.id, date(2024, 2, 1), "1200", "income", category="rent")
    make_transaction(property_.id, date(2024, 2, 14), "300.50", "expense", category="maintenance")
    make_transaction(property_.id, date(2024, 3, 31), "800", "expense", category="property_tax")
    make_transaction(property_.id, date(2024, 1, 20), "100", "income", currency="EUR")


def test_financial_summary_totals(client, db: Session, property_, first_quarter):
    """Test totals, cash flow and per-category breakdown."""
    response = client.get(f"/api/v1/properties/{property_.id}/financial-summary")
    assert response.status_code == 200
    data = response.json()
    assert data["property_id"] == property_.id
    assert data["currency"] == "USD"
    assert Decimal(data["total_income"]) == Decimal("2400")
    assert Decimal(data["total_expenses"]) == Decimal("1100.50")
    assert Decimal(data["cash_flow"]) == Decimal("1299.50")
    assert {k: Decimal(v) for k, v in data["income_by_category"].items()} == {"rent": Decimal("2400")}
    assert {k: Decimal(v) for k, v in data["expenses_by_category"].items()} == {
        "maintenance": Decimal("300.50"),
        "property_tax": Decimal("800"),
    }
    assert data["transaction_count"] == 4
    assert data["other_currency_count"] == 1


def test_financial_summary_date_range(client, db: Session, property_, first_quarter):
    """Test the summary can be limited to a period (inclusive bounds)."""
    response = client.get(
        f"/api/v1/properties/{property_.id}/financial-summary?date_from=2024-02-01&date_to=2024-02-29"
    )
    data = response.json()
    assert data["date_from"] == "2024-02-01"
    assert Decimal(data["total_income"]) == Decimal("1200")
    assert Decimal(data["total_expenses"]) == Decimal("300.50")
    assert Decimal(data["cash_flow"]) == Decimal("899.50")
    assert data["transaction_count"] == 2
    assert data["other_currency_count"] == 0


def test_financial_summary_empty(client, db: Session, property_):
    """Test a property without transactions has a zero summary."""
    data = client.get(f"/api/v1/properties/{property_.id}/financial-summary").json()
    assert Decimal(data["total_income"]) == 0
    assert Decimal(data["cash_flow"]) == 0
    assert data["income_by_category"] == {}
    assert data["transaction_count"] == 0


def test_financial_summary_inverted_range(client, db: Session, property_):
    """Test date_from after date_to is rejected."""
    response = client.get(
        f"/api/v1/properties/{property_.id}/financial-summary?date_from=2024-03-01&date_to=2024-02-01"
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_financial_summary_property_not_found(client, db: Session):
    """Test the summary of a missing property."""
    response = client.get("/api/v1/properties/99999/financial-summary")
    assert response.status_code == 404
