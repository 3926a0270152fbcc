from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    shipping_address = Column(JSON, nullable=True)
    status = Column(String, nullable=False, default="pending")  # pending, processing, shipped, completed, cancelled
    total_amount = Column(Numeric(10, 2), nullable=False)
    # snapshot pozycji z momentu checkoutu
    items = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    user = relationship("UserModel")
