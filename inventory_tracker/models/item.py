from sqlalchemy import CheckConstraint, Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from inventory_tracker.core.database import Base, utcnow


class Item(Base):
    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint("quantity_purchased >= 0", name="ck_items_quantity_purchased"),
        CheckConstraint(
            "quantity_available >= 0 AND quantity_available <= quantity_purchased",
            name="ck_items_quantity_available",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    quantity_purchased = Column(Integer, nullable=False)  # fixed at creation
    quantity_available = Column(Integer, nullable=False)  # only ever decremented by assignments
    unit_price = Column(Float, nullable=False)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    invoice = relationship("Invoice", back_populates="items", lazy="raise")
    assignments = relationship("Assignment", back_populates="item", lazy="raise")
