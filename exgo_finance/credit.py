"""Credit products: cards, loans and installment plans."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

from .errors import NotFoundError, ValidationError
from .models import CreditProduct, isoformat, utc_now

logger = logging.getLogger(__name__)


def daily_interest_rate(apr: float) -> float:
    """Convert an annual percentage rate to a simple daily rate."""
    return apr / 100 / 365


def _positive(amount: float, name: str) -> float:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not amount > 0:
        raise ValidationError(f"{name} must be a positive number, got {amount!r}")
    return float(amount)


def _settled(product: CreditProduct, balance: float, interest: float, now: Optional[datetime]) -> CreditProduct:
    balance = round(max(balance, 0.0), 2)
    interest = round(max(interest, 0.0), 2)
    paid_off = balance == 0 and interest == 0
    return replace(
        product,
        remaining_balance=balance,
        accrued_interest=interest,
        total_paid=round(max(0.0, product.principal - balance), 2),
        status='paid_off' if paid_off else 'active',
        updated_at=isoformat(now or utc_now()),
    )


def apply_payment(product: CreditProduct, amount: float, now: Optional[datetime] = None) -> CreditProduct:
    """Apply a repayment and return the updated product.

    Credit cards pay off accrued interest before the balance.  Loans and
    installment plans reduce the balance directly.  Overpayment never
    drives either figure below zero.
    """
    amount = _positive(amount, 'Payment amount')
    balance = product.remaining_balance
    interest = product.accrued_interest
    if product.credit_type == 'credit_card':
        to_interest = min(amount, interest)
        interest -= to_interest
        balance -= amount - to_interest
    else:
        balance -= amount
    updated = _settled(product, balance, interest, now)
    if updated.status == 'paid_off' and product.status != 'paid_off':
        logger.info("Credit product %s paid off", product.id)
    return updated


def add_charge(product: CreditProduct, amount: float, now: Optional[datetime] = None) -> CreditProduct:
    """Charge a credit card; a paid-off card becomes active again."""
    if product.credit_type != 'credit_card':
        raise ValidationError(f"Only credit cards accept charges, {product.id} is a {product.credit_type}")
    amount = _positive(amount, 'Charge amount')
    return _settled(product, product.remaining_balance + amount, product.accrued_interest, now)


def accrue_interest(product: CreditProduct, days: int, now: Optional[datetime] = None) -> CreditProduct:
    """Add simple interest on the remaining balance for ``days`` days."""
    if isinstance(days, bool) or not isinstance(days, int) or days < 0:
        raise ValidationError(f"days must be a non-negative integer, got {days!r}")
    if product.status == 'paid_off' or days == 0:
        return product
    interest = product.remaining_balance * daily_interest_rate(product.apr) * days
    return _settled(product, product.remaining_balance, product.accrued_interest + interest, now)


def find_product(products: Iterable[CreditProduct], product_id: str) -> CreditProduct:
    for product in products:
        if product.id == product_id:
            return product
    raise NotFoundError(f"Credit product {product_id} not found")
