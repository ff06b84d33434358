"""
Budget aggregation.

BudgetStatus is derived from a project's budget and the amounts of every
expense booked against it. It is recomputed on each read and never stored,
so it cannot drift from the expense set:

- total_spent   = sum of expense amounts
- percentage    = round(min(100, total_spent / budget * 100)), half up
- remaining     = max(0, budget - total_spent)
- is_over_budget = total_spent > budget

A zero budget yields percentage 0, remaining 0 and is_over_budget False.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal('0.00')
HUNDRED = Decimal('100')


@dataclass(frozen=True)
class BudgetStatus:
    total_spent: Decimal
    percentage: int
    remaining: Decimal
    is_over_budget: bool


def _to_decimal(value):
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def compute_budget_status(budget, amounts):
    """
    Build the BudgetStatus for a budget and an iterable of expense amounts.

    Args:
        budget: Decimal (or number) budget of the project
        amounts: iterable of expense amounts

    Returns:
        BudgetStatus
    """
    budget = _to_decimal(budget)
    total = sum((_to_decimal(amount) for amount in amounts), ZERO)

    if not budget:
        return BudgetStatus(
            total_spent=total,
            percentage=0,
            remaining=ZERO,
            is_over_budget=False,
        )

    ratio = min(HUNDRED, total / budget * HUNDRED)
    percentage = int(ratio.quantize(Decimal('1'), rounding=ROUND_HALF_UP))

    return BudgetStatus(
        total_spent=total,
        percentage=percentage,
        remaining=max(ZERO, budget - total),
        is_over_budget=total > budget,
    )
