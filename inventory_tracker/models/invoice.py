from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.orm import relationship
from inventory_tracker.core.database import Base, utcnow


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(100), unique=True, nullable=False, index=True)
    vendor_name = Column(String(255), nullable=False)
    purchase_date = Column(Date, nullable=False)
    file_name = Column(String(500), nullable=True)  # original name of the uploaded scan
    file_path = Column(String(1000), nullable=True)  # where the scan was stored on disk
    created_at = Column(DateTime, nullable=False, default=utcnow)

    items = relationship("Item", back_populates="invoice", lazy="raise")
