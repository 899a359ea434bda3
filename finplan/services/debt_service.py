"""Debt optimizer: avalanche vs snowball payoff simulation.

Implements:
1. Month-by-month amortization of a set of debts in a given order
2. Avalanche (highest rate first) and snowball (smallest balance first) comparison
3. Safe extra-payment tiers from balance and recurring expenses
4. Debt-free date scenarios for a list of candidate extra payments

Simulation rules:
- Minimum payment = original balance / remaining installments, fixed for the run
- Extra payment goes to the first debt (in strategy order) that still has a
  balance; any part it cannot absorb is NOT carried to the next debt
- Runs stop after MAX_SIMULATION_MONTHS even if balances remain
- Caller records are never mutated: each run works on fresh state
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from finplan.config import settings
from finplan.core.dates import add_months, today
from finplan.core.errors import to_decimal, validate_records
from finplan.models.debt import PayoffMethod
from finplan.schemas.debt import (
    DebtIn,
    DebtSnapshotEntry,
    DebtStrategyResult,
    MonthlySnapshot,
    PaymentSuggestion,
    PayoffOrderItem,
    PayoffPlan,
    PayoffScenario,
    StrategyComparison,
)

logger = logging.getLogger("finplan.debt")

# 50 years: guarantees termination when a payment never covers the interest
MAX_SIMULATION_MONTHS = 600

# Below this interest difference snowball's quick wins are worth more
AVALANCHE_RECOMMENDATION_THRESHOLD = Decimal("100")

# Every Nth month is kept in the plan for compact display
SNAPSHOT_SAMPLE_INTERVAL = 6

# Residual balances below this are treated as paid off
SETTLED_EPSILON = Decimal("0.0001")

SUGGESTION_TIERS = {
    "conservative": Decimal("0.25"),
    "moderate": Decimal("0.50"),
    "aggressive": Decimal("0.75"),
}

ZERO = Decimal("0")
CENTS = Decimal("0.01")


def _cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


# --- Working state ---

@dataclass(slots=True)
class _DebtState:
    """Mutable per-run copy of a debt."""
    id: int | str | uuid.UUID
    title: str
    remaining: Decimal
    monthly_rate: Decimal
    min_payment: Decimal

    @classmethod
    def from_debt(cls, debt: DebtIn) -> "_DebtState":
        term = max(debt.installments_total - debt.installments_paid, 1)
        return cls(
            id=debt.id,
            title=debt.title,
            remaining=debt.remaining_amount,
            monthly_rate=debt.interest_rate / 100 / 12,
            min_payment=debt.remaining_amount / term,
        )


@dataclass(slots=True)
class _MonthEntry:
    payment: Decimal
    principal: Decimal
    interest: Decimal
    remaining: Decimal


# --- Strategy ordering ---

def _avalanche_key(debt: DebtIn) -> Decimal:
    return -debt.interest_rate


def _snowball_key(debt: DebtIn) -> Decimal:
    return debt.remaining_amount


STRATEGY_SORT_KEYS = {
    PayoffMethod.avalanche: _avalanche_key,
    PayoffMethod.snowball: _snowball_key,
}


def order_debts(debts: list[DebtIn], method: PayoffMethod) -> list[DebtIn]:
    """Return debts in the order the strategy pays them down (stable sort)."""
    return sorted(debts, key=STRATEGY_SORT_KEYS[PayoffMethod(method)])


# --- Simulation ---

def _simulate(
    debts: list[DebtIn],
    extra_payment: Decimal,
) -> tuple[list[MonthlySnapshot], Decimal, list[_DebtState]]:
    """Run the month loop. Returns (timeline, total_interest, final_states)."""
    states = [_DebtState.from_debt(d) for d in debts]
    timeline: list[MonthlySnapshot] = []
    total_interest = ZERO
    month = 0

    while month < MAX_SIMULATION_MONTHS and any(s.remaining > 0 for s in states):
        month += 1
        entries: dict[int, _MonthEntry] = {}

        # Minimums on every open debt
        for index, state in enumerate(states):
            if state.remaining <= 0:
                continue

            interest = state.remaining * state.monthly_rate
            total_interest += interest

            payment = min(state.min_payment, state.remaining + interest)
            # A payment below the interest holds the balance flat
            principal = max(payment - interest, ZERO)

            state.remaining -= principal
            if state.remaining < SETTLED_EPSILON:
                state.remaining = ZERO

            entries[index] = _MonthEntry(payment, principal, interest, state.remaining)

        # Extra payment: first open debt only, no carry-over
        if extra_payment > 0:
            for index, state in enumerate(states):
                if state.remaining <= 0:
                    continue
                applied = min(extra_payment, state.remaining)
                state.remaining -= applied
                if state.remaining < SETTLED_EPSILON:
                    state.remaining = ZERO
                entry = entries[index]
                entry.payment += applied
                entry.principal += applied
                entry.remaining = state.remaining
                break

        timeline.append(MonthlySnapshot(
            month=month,
            debts=[
                DebtSnapshotEntry(
                    id=states[index].id,
                    title=states[index].title,
                    payment=_cents(entry.payment),
                    principal=_cents(entry.principal),
                    interest=_cents(entry.interest),
                    remaining=_cents(entry.remaining),
                )
                for index, entry in entries.items()
            ],
        ))

    return timeline, total_interest, states


def build_timeline(debts: list[DebtIn], extra_payment: Decimal = ZERO) -> list[MonthlySnapshot]:
    """Full month-by-month timeline for debts already in strategy order."""
    timeline, _, _ = _simulate(debts, extra_payment)
    return timeline


def simulate_payoff(
    debts: list[DebtIn],
    extra_payment: Decimal,
    method: PayoffMethod,
) -> PayoffPlan:
    """Simulate one strategy. `debts` must already be in strategy order."""
    timeline, total_interest, states = _simulate(debts, extra_payment)
    months = len(timeline)
    reached_cap = any(s.remaining > 0 for s in states)

    if reached_cap:
        logger.warning(
            "payoff did not complete method=%s months=%d open_debts=%d",
            PayoffMethod(method).value,
            months,
            sum(1 for s in states if s.remaining > 0),
        )

    original_total = sum((d.remaining_amount for d in debts), ZERO)

    return PayoffPlan(
        method=method,
        months=months,
        years=(Decimal(months) / 12).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP),
        total_interest_paid=_cents(total_interest),
        total_paid=_cents(original_total + total_interest),
        monthly_snapshots=timeline[::SNAPSHOT_SAMPLE_INTERVAL],
        payoff_order=[PayoffOrderItem(id=d.id, title=d.title) for d in debts],
        reached_month_cap=reached_cap,
    )


def calculate_avalanche(debts: list[DebtIn], extra_payment: Decimal = ZERO) -> PayoffPlan:
    """Payoff plan prioritizing the highest interest rate."""
    ordered = order_debts(debts, PayoffMethod.avalanche)
    return simulate_payoff(ordered, extra_payment, PayoffMethod.avalanche)


def calculate_snowball(debts: list[DebtIn], extra_payment: Decimal = ZERO) -> PayoffPlan:
    """Payoff plan prioritizing the smallest balance."""
    ordered = order_debts(debts, PayoffMethod.snowball)
    return simulate_payoff(ordered, extra_payment, PayoffMethod.snowball)


# --- Comparison ---

def recommend_strategy(interest_saved: Decimal) -> tuple[PayoffMethod, str]:
    """Pick a strategy from the interest avalanche saves over snowball."""
    if interest_saved > AVALANCHE_RECOMMENDATION_THRESHOLD:
        return PayoffMethod.avalanche, f"Avalanche saves ${interest_saved:.2f} in interest"
    return (
        PayoffMethod.snowball,
        "Snowball provides psychological wins with faster debt elimination",
    )


def compare_strategies(debts: list[DebtIn], extra_payment: Decimal = ZERO) -> DebtStrategyResult:
    avalanche = calculate_avalanche(debts, extra_payment)
    snowball = calculate_snowball(debts, extra_payment)

    interest_saved = _cents(snowball.total_interest_paid - avalanche.total_interest_paid)
    months_saved = snowball.months - avalanche.months
    recommendation, reasoning = recommend_strategy(interest_saved)

    return DebtStrategyResult(
        avalanche=avalanche,
        snowball=snowball,
        comparison=StrategyComparison(
            interest_saved=interest_saved,
            months_saved=months_saved,
            recommendation=recommendation,
            reasoning=reasoning,
        ),
    )


def _active_debts(debts) -> list[DebtIn]:
    """Validate caller records and keep only debts with a balance left."""
    validated = validate_records(DebtIn, debts, "debt")
    return [d for d in validated if d.remaining_amount > 0]


def compute_strategy(debts, extra_payment=0) -> DebtStrategyResult:
    """Compare avalanche and snowball for a user's debts.

    Accepts DebtIn instances, dicts, or attribute objects. Raises
    InvalidInputError for malformed numbers before any simulation runs.
    """
    active = _active_debts(debts)
    extra = to_decimal(extra_payment, "extra_payment", allow_negative=False)

    result = compare_strategies(active, extra)

    logger.info(
        "debt strategy computed debts=%d extra=%s avalanche_months=%d snowball_months=%d "
        "interest_saved=%s recommendation=%s",
        len(active),
        extra,
        result.avalanche.months,
        result.snowball.months,
        result.comparison.interest_saved,
        result.comparison.recommendation.value,
    )
    return result


# --- Suggestions ---

def suggest_extra_payment(
    current_balance,
    monthly_recurring_expenses,
    safety_buffer=None,
) -> PaymentSuggestion:
    """Suggest extra monthly payment tiers that keep a safety buffer intact."""
    balance = to_decimal(current_balance, "current_balance")
    expenses = to_decimal(monthly_recurring_expenses, "monthly_recurring_expenses", allow_negative=False)
    buffer = to_decimal(
        settings.default_safety_buffer if safety_buffer is None else safety_buffer,
        "safety_buffer",
        allow_negative=False,
    )

    available = balance - expenses - buffer

    if available <= 0:
        return PaymentSuggestion(
            conservative=ZERO,
            moderate=ZERO,
            aggressive=ZERO,
            available=ZERO,
            message="Focus on building emergency fund first",
        )

    tiers = {
        name: (available * fraction).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        for name, fraction in SUGGESTION_TIERS.items()
    }
    return PaymentSuggestion(
        **tiers,
        available=available,
        message=f"You have ${available:.2f} available after expenses and safety buffer",
    )


def calculate_scenarios(
    debts,
    extra_payment_options=None,
    *,
    start: date | None = None,
) -> list[PayoffScenario]:
    """Avalanche debt-free date for each candidate extra payment."""
    active = _active_debts(debts)
    options = settings.scenario_extra_payments if extra_payment_options is None else extra_payment_options
    start = start or today()

    scenarios = []
    for option in options:
        extra = to_decimal(option, "extra_payment", allow_negative=False)
        plan = calculate_avalanche(active, extra)
        scenarios.append(PayoffScenario(
            extra_payment=extra,
            months=plan.months,
            debt_free_date=add_months(start, plan.months),
            total_interest=plan.total_interest_paid,
            reached_month_cap=plan.reached_month_cap,
        ))
    return scenarios
