# app/models.py
from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Site(Base):
    __tablename__ = "sites"
    id = Column(Integer, primary_key=True, index=True)
    site_url = Column(Text, nullable=False, index=True)
    status = Column(String(16), nullable=False, default="active")
    purchase_date = Column(Date, nullable=False)
    order_code = Column(Text, nullable=False)
    activation_date = Column(Date, nullable=False)
    expiration_date = Column(Date, nullable=False)  # always activation_date + 1 year
    migration_date = Column(Date, nullable=True)
    renewed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
