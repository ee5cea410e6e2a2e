from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from inventory_tracker.core.database import Base, utcnow


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    assigned_to = Column(String(255), nullable=False)
    reason = Column(String(1000), nullable=True)
    assignment_date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    item = relationship("Item", back_populates="assignments", lazy="raise")
