"""
Subscription repository - the only component that talks to the `subs` table.

Each method issues one statement in the caller's session and never commits on
its own; the use case decides where the unit of work ends (commit()/rollback()).
"""
import logging
import uuid

from sqlalchemy import select, update, delete, func, or_, String
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.month_year import MonthYear, MonthYearFormatError
from app.domain.subscription import Subscription, is_nil_uuid
from app.infrastructure.db.models import SubscriptionModel
from app.infrastructure.repositories.errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)


def month_key(column):
    """
    'MM-YYYY' text column -> 'YYYYMM' text expression.

    Comparing the keys as text orders by first day of the month; substr and ||
    behave the same on PostgreSQL and SQLite.
    """
    year = func.substr(column, 4, 4, type_=String)
    month = func.substr(column, 1, 2, type_=String)
    return year + month


class SubscriptionFilter:
    """
    Predicate builder for the total-cost query.

    Clauses are kept in insertion order: overlap first, then user, then
    service name. Each carries its own bound parameter.

    Example:
        >>> f = SubscriptionFilter(MonthYear(1, 2025), MonthYear(12, 2025))
        >>> f.by_user(user_id).by_service_name("Netflix")
        >>> select(func.sum(SubscriptionModel.price)).where(*f.clauses)
    """

    def __init__(self, period_start: MonthYear, period_end: MonthYear):
        self._clauses = [
            month_key(SubscriptionModel.start_date) <= period_end.sort_key,
            or_(
                month_key(SubscriptionModel.end_date) >= period_start.sort_key,
                SubscriptionModel.end_date.is_(None),
            ),
        ]

    def by_user(self, user_id: uuid.UUID | None) -> "SubscriptionFilter":
        if not is_nil_uuid(user_id):
            self._clauses.append(SubscriptionModel.user_id == user_id)
        return self

    def by_service_name(self, service_name: str | None) -> "SubscriptionFilter":
        if service_name:
            self._clauses.append(SubscriptionModel.service_name == service_name)
        return self

    @property
    def clauses(self) -> tuple:
        return tuple(self._clauses)


def _to_domain(row: SubscriptionModel) -> Subscription:
    return Subscription(
        id=row.id,
        service_name=row.service_name,
        price=row.price,
        user_id=row.user_id,
        start_date=MonthYear.parse(row.start_date),
        end_date=MonthYear.parse_optional(row.end_date),
    )


def _mutable_values(sub: Subscription) -> dict:
    return {
        SubscriptionModel.service_name: sub.service_name,
        SubscriptionModel.price: sub.price,
        SubscriptionModel.user_id: sub.user_id,
        SubscriptionModel.start_date: str(sub.start_date),
        SubscriptionModel.end_date: str(sub.end_date) if sub.end_date else None,
    }


class SubscriptionRepository:
    """
    CRUD + aggregation over subscriptions

    Raises:
        NotFoundError: get_by_id/update/delete on an unknown id
        StorageError: any other persistence failure
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, sub: Subscription) -> Subscription:
        """
        Insert a subscription, assigning a fresh UUID when sub.id is nil.

        Returns:
            The stored subscription (with its id)
        """
        if is_nil_uuid(sub.id):
            sub = sub.with_id(uuid.uuid4())

        row = SubscriptionModel(
            id=sub.id,
            service_name=sub.service_name,
            price=sub.price,
            user_id=sub.user_id,
            start_date=str(sub.start_date),
            end_date=str(sub.end_date) if sub.end_date else None,
        )

        try:
            self.db.add(row)
            self.db.flush()
        except SQLAlchemyError as exc:
            logger.exception("Failed to create subscription")
            raise StorageError() from exc

        logger.info("Created subscription id=%s", sub.id)
        return sub

    def get_by_id(self, sub_id: uuid.UUID) -> Subscription:
        stmt = (
            select(SubscriptionModel)
            .where(SubscriptionModel.id == sub_id)
            .execution_options(populate_existing=True)
        )
        try:
            row = self.db.execute(stmt).scalar_one_or_none()
            sub = _to_domain(row) if row is not None else None
        except (SQLAlchemyError, MonthYearFormatError) as exc:
            logger.exception("Failed to get subscription id=%s", sub_id)
            raise StorageError() from exc

        if sub is None:
            logger.info("Subscription id=%s not found", sub_id)
            raise NotFoundError(f"subscription {sub_id} not found")

        logger.info("Got subscription id=%s", sub_id)
        return sub

    def update(self, sub_id: uuid.UUID, sub: Subscription) -> None:
        """Replace every mutable field of the row; id itself never changes."""
        stmt = (
            update(SubscriptionModel)
            .where(SubscriptionModel.id == sub_id)
            .values(_mutable_values(sub))
        )
        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.exception("Failed to update subscription id=%s", sub_id)
            raise StorageError() from exc

        if result.rowcount == 0:
            logger.info("Subscription id=%s not found for update", sub_id)
            raise NotFoundError(f"subscription {sub_id} not found")

        logger.info("Updated subscription id=%s", sub_id)

    def delete(self, sub_id: uuid.UUID) -> None:
        stmt = delete(SubscriptionModel).where(SubscriptionModel.id == sub_id)
        try:
            result = self.db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.exception("Failed to delete subscription id=%s", sub_id)
            raise StorageError() from exc

        if result.rowcount == 0:
            logger.info("Subscription id=%s not found for delete", sub_id)
            raise NotFoundError(f"subscription {sub_id} not found")

        logger.info("Deleted subscription id=%s", sub_id)

    def get_all(self) -> list[Subscription]:
        stmt = select(SubscriptionModel).order_by(SubscriptionModel.id)
        try:
            rows = self.db.execute(stmt).scalars().all()
            subs = [_to_domain(row) for row in rows]
        except (SQLAlchemyError, MonthYearFormatError) as exc:
            logger.exception("Failed to get subscriptions")
            raise StorageError() from exc

        logger.info("Found %d subscription(s)", len(subs))
        return subs

    def get_total_sum(
        self,
        period_start: MonthYear,
        period_end: MonthYear,
        user_id: uuid.UUID | None = None,
        service_name: str | None = None,
    ) -> int:
        """
        Sum of prices of subscriptions active at any point of the period.

        A subscription counts when start_date <= period_end and its end_date
        is either absent or >= period_start. user_id / service_name narrow the
        set further when given.

        Returns:
            Total price; 0 when nothing matches
        """
        filters = (
            SubscriptionFilter(period_start, period_end)
            .by_user(user_id)
            .by_service_name(service_name)
        )
        stmt = select(
            func.coalesce(func.sum(SubscriptionModel.price), 0)
        ).where(*filters.clauses)

        try:
            total = self.db.execute(stmt).scalar_one()
        except SQLAlchemyError as exc:
            logger.exception("Failed to calculate total sum")
            raise StorageError() from exc

        total = int(total or 0)
        logger.info("Calculated total sum: %d", total)
        return total

    def commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            logger.exception("Failed to commit transaction")
            raise StorageError() from exc

    def rollback(self) -> None:
        self.db.rollback()
