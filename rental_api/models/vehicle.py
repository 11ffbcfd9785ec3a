from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from rental_api.core.database import Base

PLACEHOLDER_IMAGE_URL = "https://placehold.co/600x400/gray/white?text=No+Image"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String, nullable=False)
    capacity = Column(Integer, nullable=False)
    transmission_type = Column(String, nullable=False)
    fuel_type = Column(String, nullable=False)
    daily_rate = Column(Float, nullable=False)
    late_fee_per_day = Column(Float, default=0.0, nullable=False)
    main_image_url = Column(String, default=PLACEHOLDER_IMAGE_URL, nullable=False)
    # General availability; date-specific availability comes from orders
    is_available = Column(Boolean, default=True, nullable=False)
    license_plate = Column(String, unique=True, index=True, nullable=False)
    city = Column(String, nullable=False)
    address = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User", back_populates="vehicles")
    orders = relationship("Order", back_populates="vehicle")
