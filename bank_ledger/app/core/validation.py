from __future__ import annotations

from typing import Any

from .errors import ValidationError


MAX_ACCOUNT_NUMBER = 2**63 - 1
# Balances live in a signed 64-bit column.
MAX_BALANCE = 2**63 - 1


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def require_positive_amount(amount: Any) -> int:
    if not _is_int(amount) or not 1 <= amount <= MAX_BALANCE:
        raise ValidationError(
            f"Amount must be an integer between 1 and {MAX_BALANCE} minor units"
        )
    return amount


def require_delta(delta: Any) -> int:
    if not _is_int(delta) or abs(delta) > MAX_BALANCE:
        raise ValidationError(
            f"Balance delta must be an integer of at most {MAX_BALANCE} minor units"
        )
    return delta


def require_account_number(number: Any) -> int:
    """Account numbers are bounded integers: 1 <= number <= 2**63 - 1."""
    if not _is_int(number) or not 1 <= number <= MAX_ACCOUNT_NUMBER:
        raise ValidationError(f"Invalid account number: {number!r}")
    return number


def require_distinct_accounts(source: int, dest: int) -> None:
    if source == dest:
        raise ValidationError("Cannot transfer to the same account")
