from sqlalchemy.orm import Session

from app.db.models.property import Property as PropertyModel
from app.errors import NotFoundError


def get_property_by_id(db: Session, property_id: int) -> PropertyModel | None:
    """Get a property by ID."""
    return db.query(PropertyModel).filter(PropertyModel.id == property_id).first()


def lock_property(db: Session, property_id: int) -> PropertyModel | None:
    """
    Get a property by ID and lock its row until the current transaction ends.

    Lease writes for one property serialize on this lock (SELECT ... FOR UPDATE).
    SQLite has no row locks and ignores the clause.
    """
    return (
        db.query(PropertyModel)
        .filter(PropertyModel.id == property_id)
        .with_for_update()
        .first()
    )


def get_all_properties_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 100,
    title: str | None = None,
) -> tuple[list[PropertyModel], int]:
    """Get properties with pagination and an optional case-insensitive title filter."""
    query = db.query(PropertyModel)
    if title:
        query = query.filter(PropertyModel.title.ilike(f"%{title}%"))

    total = query.count()
    skip = (page - 1) * page_size
    properties = query.order_by(PropertyModel.id).offset(skip).limit(page_size).all()
    return properties, total


def create_property(db: Session, **fields) -> PropertyModel:
    """Create a new property in the database. Pure data access - no business logic."""
    db_property = PropertyModel(**fields)
    db.add(db_property)
    db.commit()
    db.refresh(db_property)
    return db_property


def update_property(db: Session, property_id: int, **kwargs) -> PropertyModel:
    """
    Update a property. Only updates fields that are explicitly provided.

    To clear a nullable field, explicitly pass it with None value.
    """
    db_property = get_property_by_id(db, property_id)
    if not db_property:
        raise NotFoundError("Property not found")

    for name, value in kwargs.items():
        setattr(db_property, name, value)

    db.commit()
    db.refresh(db_property)
    return db_property


def delete_property(db: Session, property_id: int) -> None:
    """Delete a property from the database. Pure data access - no business logic."""
    db_property = get_property_by_id(db, property_id)
    if not db_property:
        raise NotFoundError("Property not found")

    db.delete(db_property)
    db.commit()
