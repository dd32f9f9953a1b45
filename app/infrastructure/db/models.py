"""
SQLAlchemy ORM models
"""
import uuid

from sqlalchemy import String, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.db.session import Base


class SubscriptionModel(Base):
    """
    Recurring online subscription of a user

    Dates are stored as 'MM-YYYY' text; end_date NULL means open-ended.
    """
    __tablename__ = "subs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    # Column is "name" in the table, service_name in the domain
    service_name: Mapped[str] = mapped_column("name", Text, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    start_date: Mapped[str] = mapped_column(String(7), nullable=False)
    end_date: Mapped[str | None] = mapped_column(String(7), nullable=True)
