"""Tests for Subscriptions use cases — unit of work, update read-back, totals."""
import uuid
from unittest.mock import patch

import pytest
from sqlalchemy.orm import sessionmaker

from app.application.subscriptions import (
    CreateSubscriptionUseCase, GetSubscriptionUseCase, ListSubscriptionsUseCase,
    UpdateSubscriptionUseCase, DeleteSubscriptionUseCase, TotalSumUseCase,
)
from app.domain.month_year import MonthYear
from app.domain.subscription import Subscription, NIL_UUID
from app.infrastructure.repositories.errors import NotFoundError, StorageError
from app.infrastructure.repositories.subscriptions import SubscriptionRepository


def _sub(user_id, name="YouTube Premium", price=299, start="01-2025", end=None):
    return Subscription.from_raw(name, price, user_id, start, end)


@pytest.fixture
def other_session(db_engine):
    """Independent session on the same database, to observe committed state"""
    session = sessionmaker(bind=db_engine)()
    yield session
    session.close()


class TestCreateSubscription:
    def test_create_commits(self, db_session, other_session, user_id):
        created = CreateSubscriptionUseCase(db_session).execute(_sub(user_id))

        assert created.id != NIL_UUID
        fetched = GetSubscriptionUseCase(other_session).execute(created.id)
        assert fetched.service_name == "YouTube Premium"
        assert fetched.end_date is None

    def test_uncommitted_create_not_visible_elsewhere(self, db_session, other_session, user_id):
        with patch.object(SubscriptionRepository, "commit"):
            created = CreateSubscriptionUseCase(db_session).execute(_sub(user_id))

        with pytest.raises(NotFoundError):
            GetSubscriptionUseCase(other_session).execute(created.id)

    def test_duplicate_id_is_storage_error(self, db_session, user_id):
        sub_id = uuid.uuid4()
        CreateSubscriptionUseCase(db_session).execute(_sub(user_id).with_id(sub_id))

        with pytest.raises(StorageError):
            CreateSubscriptionUseCase(db_session).execute(_sub(user_id).with_id(sub_id))

        # Session is usable again after the rollback
        assert len(ListSubscriptionsUseCase(db_session).execute()) == 1


class TestUpdateSubscription:
    def test_returns_refetched_record(self, db_session, user_id):
        created = CreateSubscriptionUseCase(db_session).execute(_sub(user_id))

        updated = UpdateSubscriptionUseCase(db_session).execute(
            created.id, _sub(user_id, name="YouTube Music", price=199, end="06-2025"),
        )

        assert updated.id == created.id
        assert updated.service_name == "YouTube Music"
        assert updated.price == 199
        assert updated.end_date == MonthYear(6, 2025)

    def test_update_is_committed(self, db_session, other_session, user_id):
        created = CreateSubscriptionUseCase(db_session).execute(_sub(user_id))
        UpdateSubscriptionUseCase(db_session).execute(created.id, _sub(user_id, price=1))

        assert GetSubscriptionUseCase(other_session).execute(created.id).price == 1

    def test_uncommitted_update_not_visible_elsewhere(self, db_session, other_session, user_id):
        created = CreateSubscriptionUseCase(db_session).execute(_sub(user_id, price=299))

        with patch.object(SubscriptionRepository, "commit"):
            UpdateSubscriptionUseCase(db_session).execute(created.id, _sub(user_id, price=1))

        assert GetSubscriptionUseCase(other_session).execute(created.id).price == 299

    def test_unknown_id(self, db_session, user_id):
        with pytest.raises(NotFoundError):
            UpdateSubscriptionUseCase(db_session).execute(uuid.uuid4(), _sub(user_id))

    def test_failed_read_back_rolls_back_update(self, db_session, other_session, user_id):
        created = CreateSubscriptionUseCase(db_session).execute(_sub(user_id, price=299))

        with patch.object(SubscriptionRepository, "get_by_id", side_effect=NotFoundError()):
            with pytest.raises(NotFoundError):
                UpdateSubscriptionUseCase(db_session).execute(created.id, _sub(user_id, price=1))

        assert GetSubscriptionUseCase(other_session).execute(created.id).price == 299


class TestDeleteSubscription:
    def test_delete(self, db_session, other_session, user_id):
        created = CreateSubscriptionUseCase(db_session).execute(_sub(user_id))
        DeleteSubscriptionUseCase(db_session).execute(created.id)

        with pytest.raises(NotFoundError):
            GetSubscriptionUseCase(other_session).execute(created.id)

    def test_unknown_id(self, db_session):
        with pytest.raises(NotFoundError):
            DeleteSubscriptionUseCase(db_session).execute(uuid.uuid4())


class TestListSubscriptions:
    def test_list(self, db_session, user_id):
        CreateSubscriptionUseCase(db_session).execute(_sub(user_id, name="A"))
        CreateSubscriptionUseCase(db_session).execute(_sub(user_id, name="B"))

        names = sorted(s.service_name for s in ListSubscriptionsUseCase(db_session).execute())
        assert names == ["A", "B"]


class TestTotalSum:
    def test_total(self, db_session, user_id, other_user_id):
        CreateSubscriptionUseCase(db_session).execute(_sub(user_id, price=100, start="01-2025"))
        CreateSubscriptionUseCase(db_session).execute(_sub(other_user_id, price=50, start="02-2025"))

        use_case = TotalSumUseCase(db_session)
        period = (MonthYear(3, 2025), MonthYear(3, 2025))
        assert use_case.execute(*period) == 150
        assert use_case.execute(*period, user_id=other_user_id) == 50
        assert use_case.execute(MonthYear(1, 2024), MonthYear(12, 2024)) == 0
