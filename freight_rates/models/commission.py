"""
Commission ledger database model.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime

from freight_rates.database import Base


class CommissionRecordRow(Base):
    """One realized commission, as stored by SqlCommissionStorage"""
    __tablename__ = "commission_records"

    # Insertion order is the ledger order
    position = Column(Integer, primary_key=True)
    id = Column(String, unique=True, index=True, nullable=False)
    timestamp = Column(DateTime(timezone=True), index=True, nullable=False)

    provider = Column(String, index=True, nullable=False)
    carrier_name = Column(String, nullable=False)
    service_name = Column(String, nullable=False)

    customer_price = Column(Float, nullable=False)
    commission = Column(Float, nullable=False)
    commission_percentage = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False)

    shipment_id = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)
    route = Column(String, nullable=False, default="Unknown")

    def __repr__(self):
        return f"<CommissionRecordRow(id='{self.id}', provider='{self.provider}', commission={self.commission})>"
