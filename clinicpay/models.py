import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, Integer, String, Text, func
from clinicpay.database import Base


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"   # reserved, never written by this service


class PaymentIntent(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_code = Column(String, unique=True, index=True, nullable=False)
    amount = Column(Integer, nullable=False)          # minor currency unit
    status = Column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)
    transaction_id = Column(String, nullable=True)    # set with PAID only
    description = Column(Text, nullable=True)         # bank narration, set with PAID only
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
