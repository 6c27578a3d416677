"""Amount arithmetic for bills and weekly labour records.

Every function here is pure: it validates its inputs, computes, and returns a
``Decimal`` rounded to paise. Invalid input raises ``InvalidAmount``.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from paygo.exceptions import DebitExceedsBaseWarning, EmptyEntrySet, InvalidAmount
from paygo.models import to_money
from paygo.models.nmr import NMREntry

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
# Largest rupee value whose paise fit a signed 64-bit INTEGER column.
MAX_AMOUNT = Decimal(2**63 - 1) / 100


def require_amount(name: str, value: object) -> Decimal:
    """Coerce ``value`` to a finite, non-negative Decimal or raise InvalidAmount."""
    if isinstance(value, bool) or value is None:
        raise InvalidAmount(f"{name} must be a number, got {value!r}")
    try:
        # str() first so floats keep their short repr: 0.1 -> Decimal('0.1')
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"{name} must be a number, got {value!r}") from None
    if not number.is_finite():
        raise InvalidAmount(f"{name} must be finite, got {value!r}")
    if number < 0:
        raise InvalidAmount(f"{name} must not be negative, got {value!r}")
    return _within_limit(name, number)


def _within_limit(name: str, number: Decimal) -> Decimal:
    if number > MAX_AMOUNT:
        raise InvalidAmount(f"{name} {number} exceeds the largest supported amount {MAX_AMOUNT}")
    return number


def compute_bill_total(unit_price: object, quantity: object) -> Decimal:
    price = require_amount("unit_price", unit_price)
    qty = require_amount("quantity", quantity)
    return to_money(_within_limit("bill total", price * qty))


def compute_entry_amount(persons: object, rate: object, hours: object) -> Decimal:
    count = require_amount("persons", persons)
    per_hour = require_amount("rate", rate)
    duration = require_amount("hours", hours)
    return to_money(_within_limit("entry amount", count * per_hour * duration))


def compute_weekly_total(entries: Iterable[NMREntry]) -> Decimal:
    entries = list(entries)
    if not entries:
        raise EmptyEntrySet("A weekly record must contain at least one entry")
    total = sum((compute_entry_amount(e.persons, e.rate, e.hours) for e in entries), ZERO)
    return to_money(_within_limit("weekly total", total))


def debits_exceed_base(base: Decimal, pm_debit: Decimal, qc_debit: Decimal) -> bool:
    return pm_debit + qc_debit > base


def compute_final_amount(
    base_amount: object,
    pm_debit: object,
    qc_debit: object,
    *,
    strict: bool = False,
) -> Decimal:
    """``max(0, base - pm_debit - qc_debit)``.

    Debits larger than the base are clamped to a zero final amount and a
    ``DebitExceedsBaseWarning`` is issued. With ``strict=True`` they raise
    ``InvalidAmount`` instead.
    """
    base = require_amount("base_amount", base_amount)
    pm = require_amount("pm_debit", pm_debit)
    qc = require_amount("qc_debit", qc_debit)

    if debits_exceed_base(base, pm, qc):
        message = f"Debits {pm} + {qc} exceed base amount {base}"
        if strict:
            raise InvalidAmount(message)
        logger.warning("%s; final amount clamped to zero", message)
        warnings.warn(DebitExceedsBaseWarning(message), stacklevel=2)
        return to_money(ZERO)
    return to_money(base - pm - qc)


def compute_contractor_estimate(unit_price: object, estimated_qty: object) -> Decimal:
    price = require_amount("unit_price", unit_price)
    qty = require_amount("estimated_qty", estimated_qty)
    return to_money(_within_limit("estimated amount", price * qty))
