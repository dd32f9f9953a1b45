"""
Subscription use cases — CRUD and total cost over a period.

Each use case owns one unit of work: repository calls run in the caller's
session, then the use case commits, or rolls back on any repository error.
"""
import uuid
from sqlalchemy.orm import Session

from app.domain.month_year import MonthYear
from app.domain.subscription import Subscription
from app.infrastructure.repositories.errors import RepositoryError
from app.infrastructure.repositories.subscriptions import SubscriptionRepository


class _SubscriptionUseCase:
    def __init__(self, db: Session):
        self.db = db
        self.repo = SubscriptionRepository(db)


class CreateSubscriptionUseCase(_SubscriptionUseCase):
    def execute(self, sub: Subscription) -> Subscription:
        try:
            created = self.repo.create(sub)
            self.repo.commit()
        except RepositoryError:
            self.repo.rollback()
            raise
        return created


class GetSubscriptionUseCase(_SubscriptionUseCase):
    def execute(self, sub_id: uuid.UUID) -> Subscription:
        return self.repo.get_by_id(sub_id)


class ListSubscriptionsUseCase(_SubscriptionUseCase):
    def execute(self) -> list[Subscription]:
        return self.repo.get_all()


class UpdateSubscriptionUseCase(_SubscriptionUseCase):
    """
    Full replacement followed by a read-back.

    UPDATE and SELECT share one transaction; nothing is committed unless the
    read-back succeeds, so a concurrent delete cannot leave a half-applied
    update visible.
    """

    def execute(self, sub_id: uuid.UUID, sub: Subscription) -> Subscription:
        try:
            self.repo.update(sub_id, sub)
            updated = self.repo.get_by_id(sub_id)
            self.repo.commit()
        except RepositoryError:
            self.repo.rollback()
            raise
        return updated


class DeleteSubscriptionUseCase(_SubscriptionUseCase):
    def execute(self, sub_id: uuid.UUID) -> None:
        try:
            self.repo.delete(sub_id)
            self.repo.commit()
        except RepositoryError:
            self.repo.rollback()
            raise


class TotalSumUseCase(_SubscriptionUseCase):
    def execute(
        self,
        period_start: MonthYear,
        period_end: MonthYear,
        user_id: uuid.UUID | None = None,
        service_name: str | None = None,
    ) -> int:
        return self.repo.get_total_sum(period_start, period_end, user_id, service_name)
