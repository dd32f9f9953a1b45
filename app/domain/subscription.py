"""
Subscription domain entity and request validation.

Validation rules (all evaluated, at most one message each, in order):
  - service_name non-empty
  - price > 0
  - user_id present and not the nil UUID
  - start_date non-empty and 'MM-YYYY'
  - end_date, when given and non-empty, 'MM-YYYY'

end_date >= start_date is not enforced.
"""
import uuid
from dataclasses import dataclass, field, replace

from app.domain.month_year import MonthYear, validate_month_year

NIL_UUID = uuid.UUID(int=0)

MSG_NAME_REQUIRED = "service_name is required"
MSG_PRICE_POSITIVE = "price must be positive"
MSG_USER_REQUIRED = "user_id is required"
MSG_START_REQUIRED = "start_date is required"
MSG_START_FORMAT = "start_date has invalid format, must be 'MM-YYYY'"
MSG_END_FORMAT = "end_date has invalid format, must be 'MM-YYYY'"


def is_nil_uuid(value: uuid.UUID | None) -> bool:
    return value is None or value == NIL_UUID


def validate_sub_request(
    service_name: str | None,
    price: int | None,
    user_id: uuid.UUID | None,
    start_date: str | None,
    end_date: str | None = None,
) -> list[str]:
    """
    Check raw subscription fields, collecting every violation.

    Returns:
        List of human-readable messages; empty list when the input is valid.

    Example:
        >>> validate_sub_request("Netflix", -5, None, "")
        ['price must be positive', 'user_id is required', 'start_date is required']
    """
    errors: list[str] = []

    if not service_name:
        errors.append(MSG_NAME_REQUIRED)

    if price is None or price <= 0:
        errors.append(MSG_PRICE_POSITIVE)

    if is_nil_uuid(user_id):
        errors.append(MSG_USER_REQUIRED)

    if not start_date:
        errors.append(MSG_START_REQUIRED)
    elif not validate_month_year(start_date):
        errors.append(MSG_START_FORMAT)

    if end_date and not validate_month_year(end_date):
        errors.append(MSG_END_FORMAT)

    return errors


@dataclass
class Subscription:
    """
    Subscription record.

    id is assigned by the repository on create when left as the nil UUID.
    end_date None means the subscription is still active.
    """
    service_name: str
    price: int
    user_id: uuid.UUID
    start_date: MonthYear
    end_date: MonthYear | None = None
    id: uuid.UUID = field(default=NIL_UUID)

    @classmethod
    def from_raw(
        cls,
        service_name: str,
        price: int,
        user_id: uuid.UUID,
        start_date: str,
        end_date: str | None = None,
        id: uuid.UUID = NIL_UUID,
    ) -> "Subscription":
        """Build from already validated request fields."""
        return cls(
            id=id,
            service_name=service_name,
            price=price,
            user_id=user_id,
            start_date=MonthYear.parse(start_date),
            end_date=MonthYear.parse_optional(end_date),
        )

    def with_id(self, new_id: uuid.UUID) -> "Subscription":
        return replace(self, id=new_id)
