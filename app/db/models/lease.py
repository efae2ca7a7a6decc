from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship

from app.db.base import Base


class Lease(Base):
    __tablename__ = "leases"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=True, index=True)
    lease_start = Column(Date, nullable=False)
    lease_end = Column(Date, nullable=False)
    rent_amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    security_deposit = Column(Numeric(12, 2), nullable=False, default=0)
    payment_frequency = Column(String(20), nullable=False, default="monthly")
    payment_due_day = Column(Integer, nullable=True)
    terminated_on = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    property = relationship("Property", backref="leases")
    tenant = relationship("Tenant", backref="leases")
