"""
Finance service for the dashboard pages.

Typed wrappers around the dispatcher for each dashboard endpoint. The user id
in every path comes from the locally stored profile, the same one the pages
read; a missing or unreadable profile raises SessionError.
"""

from __future__ import annotations

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from finbins.integrations.contracts.interfaces import (
    Bucket,
    FinancialSummary,
    Recommendation,
    Transaction,
)
from finbins.integrations.dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)

PRIORITY_STEP = 0.1


def clamp_priority(score: float) -> float:
    return max(0.0, min(1.0, float(score)))


def priority_label(score: float) -> str:
    if score >= 0.7:
        return "High"
    if score >= 0.4:
        return "Medium"
    return "Low"


def sort_by_priority(buckets: Iterable[Bucket]) -> List[Bucket]:
    """Highest priority first; ties keep insertion order."""
    return sorted(buckets, key=lambda b: b.priority_score, reverse=True)


def bucket_progress(bucket: Bucket) -> int:
    """Saved amount as a whole percentage of the target, rounded half up.

    Not capped at 100; a bucket without a positive target reports 0.
    """
    if bucket.target_amount <= 0:
        return 0
    return int(math.floor(bucket.current_saved_amount / bucket.target_amount * 100 + 0.5))


# ---------------------------------------------------------------------------
# Summary figures
# ---------------------------------------------------------------------------

def monthly_savings(summary: FinancialSummary) -> float:
    return summary.total_income - summary.total_expenses


def net_worth(summary: FinancialSummary) -> float:
    return summary.savings_balance + summary.investment_balance - summary.debt_balance


# ---------------------------------------------------------------------------
# Transaction filters and totals
# ---------------------------------------------------------------------------

PERIODS = ("today", "week", "month", "year")


@dataclass(frozen=True)
class TransactionTotals:
    income: float
    expenses: float          # positive magnitude of the outgoing amounts

    @property
    def net(self) -> float:
        return self.income - self.expenses


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC, junk gives None."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _months_back(moment: datetime, months: int) -> datetime:
    month_index = moment.year * 12 + moment.month - 1 - months
    year, month = divmod(month_index, 12)
    day = min(moment.day, calendar.monthrange(year, month + 1)[1])
    return moment.replace(year=year, month=month + 1, day=day)


def period_start(period: Optional[str], now: datetime) -> Optional[datetime]:
    if period == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return _months_back(now, 1)
    if period == "year":
        return _months_back(now, 12)
    return None


def filter_transactions(
    transactions: Iterable[Transaction],
    search: Optional[str] = None,
    category: Optional[str] = None,
    period: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Transaction]:
    """Apply the transactions page filters.

    ``search`` matches description or category case-insensitively,
    ``category`` must match exactly, and ``period`` (one of PERIODS) keeps
    transactions dated on or after the period start. Unknown periods keep
    everything; undated transactions drop out once a period is set.
    """
    result = list(transactions)
    if search:
        needle = search.lower()
        result = [
            t for t in result
            if needle in t.description.lower() or needle in (t.category or "").lower()
        ]
    if category:
        result = [t for t in result if t.category == category]
    start = period_start(period, now or datetime.now(timezone.utc))
    if start is not None:
        kept = []
        for t in result:
            moment = parse_timestamp(t.transaction_date)
            if moment is not None and moment >= start:
                kept.append(t)
        result = kept
    return result


def transaction_categories(transactions: Iterable[Transaction]) -> List[str]:
    """Distinct non-empty categories in first-seen order."""
    seen: List[str] = []
    for t in transactions:
        if t.category and t.category not in seen:
            seen.append(t.category)
    return seen


def transaction_totals(transactions: Iterable[Transaction]) -> TransactionTotals:
    income = 0.0
    expenses = 0.0
    for t in transactions:
        if t.amount > 0:
            income += t.amount
        elif t.amount < 0:
            expenses += abs(t.amount)
    return TransactionTotals(income=income, expenses=expenses)


class FinanceService:
    def __init__(self, dispatcher: RequestDispatcher) -> None:
        self.dispatcher = dispatcher

    def _user_id(self) -> int:
        return self.dispatcher.storage.get_user_profile().id

    # ------------------------------------------------------------------ #
    # Summary / onboarding
    # ------------------------------------------------------------------ #
    async def get_financial_summary(self) -> FinancialSummary:
        data = await self.dispatcher.request(f"/financial-summary/{self._user_id()}")
        return FinancialSummary.model_validate(data)

    async def add_financial_summary(self, summary: Dict[str, Any]) -> Any:
        """Submit onboarding data. Returns the backend's response as-is."""
        user_id = self._user_id()
        body = dict(summary)
        body["userId"] = user_id
        return await self.dispatcher.request(f"/financial-summary/add/{user_id}", method="POST", body=body)

    # ------------------------------------------------------------------ #
    # Buckets
    # ------------------------------------------------------------------ #
    async def list_buckets(self) -> List[Bucket]:
        data = await self.dispatcher.request(f"/buckets/{self._user_id()}")
        return sort_by_priority(Bucket.model_validate(item) for item in data or [])

    async def create_bucket(
        self,
        name: str,
        target_amount: Any,
        deadline: str,
        priority_score: Any = 0.5,
        current_saved_amount: Any = 0,
    ) -> Bucket:
        body = {
            "userId": self._user_id(),
            "name": name,
            "targetAmount": target_amount,
            "currentSavedAmount": current_saved_amount,
            "priorityScore": priority_score,
            "deadline": deadline,
        }
        data = await self.dispatcher.request("/buckets", method="POST", body=body)
        return Bucket.model_validate(data)

    async def update_priority(self, bucket_id: int, new_priority: float) -> float:
        priority = clamp_priority(new_priority)
        await self.dispatcher.request(
            f"/buckets/{self._user_id()}/{bucket_id}/priority",
            method="PUT",
            body=priority,
        )
        return priority

    async def adjust_priority(self, bucket: Bucket, step: float = PRIORITY_STEP) -> float:
        """Nudge a bucket's priority up (positive step) or down, within [0, 1]."""
        return await self.update_priority(bucket.id, round(bucket.priority_score + step, 10))

    async def delete_bucket(self, bucket_id: int) -> None:
        await self.dispatcher.request(f"/buckets/{self._user_id()}/{bucket_id}", method="DELETE")

    # ------------------------------------------------------------------ #
    # Transactions & recommendations
    # ------------------------------------------------------------------ #
    async def list_transactions(self) -> List[Transaction]:
        data = await self.dispatcher.request(f"/transactions/{self._user_id()}")
        return [Transaction.model_validate(item) for item in data or []]

    async def create_transaction(self, fields: Dict[str, Any]) -> Transaction:
        body = dict(fields)
        body["userId"] = self._user_id()
        data = await self.dispatcher.request("/transactions", method="POST", body=body)
        return Transaction.model_validate(data)

    async def get_recommendations(self) -> List[Recommendation]:
        data = await self.dispatcher.request(f"/ai-analysis/recommendations/{self._user_id()}")
        return [Recommendation.model_validate(item) for item in data or []]
