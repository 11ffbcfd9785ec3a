from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from rental_api.core.database import Base
from rental_api.models.enums import OrderStatus


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    # Calendar dates, both ends inclusive for overlap checks
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    rental_days = Column(Integer, nullable=False)
    total_price = Column(Float, nullable=False)
    deposit_amount = Column(Float, default=0.0, nullable=False)
    remaining_amount = Column(Float, nullable=False)
    payment_method = Column(String, nullable=True)
    order_status = Column(String(20), default=OrderStatus.pending_review.value, nullable=False)
    admin_notes = Column(Text, nullable=True)
    pickup_location = Column(String, nullable=True)
    return_location = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="orders")
    vehicle = relationship("Vehicle", back_populates="orders")

    __table_args__ = (Index("ix_orders_vehicle_period", "vehicle_id", "start_date", "end_date"),)
