"""
In-memory demo data store.

Holds the only mutable state behind synthetic sessions: buckets,
transactions, per-user financial summaries and a shared id counter. Every
instance is seeded independently, so tests (and the FastAPI demo backend) can
each own an isolated store.

There is no locking; concurrent mutations are last-write-wins. Nothing is
persisted past the lifetime of the instance.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from finbins.integrations.contracts.interfaces import (
    Bucket,
    BucketStatus,
    AnalysisSummary,
    ExpenseAnalysis,
    Expenses,
    FinancialSummary,
    Income,
    IncomeAnalysis,
    Level,
    Recommendation,
    Transaction,
)
from finbins.integrations.policy.response_wrappers import ApiResult, coerce_number

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 0.5
DEFAULT_DEADLINE_DAYS = 180
DEFAULT_CATEGORY = "Other"
DEFAULT_DESCRIPTION = "New Transaction"
PRIORITY_REQUIRED = "Priority score is required"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """ISO-8601 with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_SEED_RECOMMENDATIONS: List[Recommendation] = [
    Recommendation(
        id=1,
        category="Savings",
        title="Increase Emergency Fund",
        description=(
            "Your emergency fund is below the recommended 3-month expense coverage. "
            "Consider allocating more to your Emergency Fund bucket."
        ),
        potential_impact=Level.HIGH,
        difficulty=Level.MEDIUM,
    ),
    Recommendation(
        id=2,
        category="Expenses",
        title="Reduce Subscription Services",
        description=(
            "You're spending $85 monthly on subscription services. "
            "Consider reviewing and canceling unused subscriptions."
        ),
        potential_impact=Level.MEDIUM,
        difficulty=Level.LOW,
    ),
    Recommendation(
        id=3,
        category="Debt",
        title="Refinance Loans",
        description=(
            "Current interest rates are lower than your existing loans. "
            "Refinancing could save you $150 monthly."
        ),
        potential_impact=Level.HIGH,
        difficulty=Level.MEDIUM,
    ),
    Recommendation(
        id=4,
        category="Income",
        title="Explore Side Income",
        description="Based on your skills, you could earn an additional $500-$1000 monthly through freelance work.",
        potential_impact=Level.HIGH,
        difficulty=Level.HIGH,
    ),
]


SEED_INCOME_ANALYSIS = IncomeAnalysis(
    summary=(
        "Your income has increased by 15.5% over the past 6 months. The main contributor to this growth was "
        "your salary increase in March and additional investment income in May and June."
    ),
    diversification=(
        "Your income is primarily from your salary (92%). Consider diversifying your income sources by "
        "exploring side income opportunities or increasing your investment income."
    ),
)

SEED_EXPENSE_ANALYSIS = ExpenseAnalysis(
    summary=(
        "Housing represents 48% of your monthly expenses, which is slightly above the recommended 30-35%. "
        "Your food expenses are within the recommended range, but entertainment expenses have increased by "
        "25% in the last month."
    ),
    potential_savings=(
        "You could save approximately $250 per month by reducing your subscription services ($50), "
        "optimizing your utility usage ($75), and reducing dining out expenses ($125)."
    ),
)

SEED_ANALYSIS_SUMMARY = AnalysisSummary(
    savings_rate=(
        "Your current savings rate is 18% of your income, which is above the recommended 15%. You've "
        "increased your savings rate by 5% over the past 6 months, which is excellent progress."
    ),
    savings_goals=(
        "At your current savings rate, you'll reach your Emergency Fund goal in approximately 10 months. "
        "Your Vacation fund is 50% complete and on track to be fully funded by your deadline."
    ),
)

def _seed_buckets(now: datetime) -> List[Bucket]:
    return [
        Bucket(
            id=1,
            user_id=1,
            name="Emergency Fund",
            target_amount=10000.0,
            current_saved_amount=2000.0,
            priority_score=0.9,
            deadline=to_iso(now + timedelta(days=180)),
        ),
        Bucket(
            id=2,
            user_id=1,
            name="Vacation",
            target_amount=3000.0,
            current_saved_amount=1500.0,
            priority_score=0.6,
            deadline=to_iso(now + timedelta(days=90)),
        ),
        Bucket(
            id=3,
            user_id=1,
            name="New Car",
            target_amount=20000.0,
            current_saved_amount=5000.0,
            priority_score=0.7,
            deadline=to_iso(now + timedelta(days=365)),
        ),
    ]


def _seed_transactions(now: datetime) -> List[Transaction]:
    return [
        Transaction(
            id=1,
            user_id=1,
            amount=-50.0,
            description="Grocery Shopping",
            category="Groceries",
            transaction_date=to_iso(now - timedelta(days=1)),
            reference="REF123",
            notes="Weekly shopping",
            is_reconciled=True,
        ),
        Transaction(
            id=2,
            user_id=1,
            amount=-120.0,
            description="Electric Bill",
            category="Utilities",
            transaction_date=to_iso(now - timedelta(days=5)),
            reference="UTIL456",
            notes="Monthly payment",
            is_reconciled=True,
        ),
        Transaction(
            id=3,
            user_id=1,
            amount=2500.0,
            description="Salary Deposit",
            category="Income",
            transaction_date=to_iso(now - timedelta(days=15)),
            reference="SAL789",
            notes="Monthly salary",
            is_reconciled=True,
        ),
    ]


def seed_financial_summary(user_id: int) -> FinancialSummary:
    return FinancialSummary(
        id=1,
        savings_balance=5000.0,
        investment_balance=15000.0,
        debt_balance=8000.0,
        user_id=user_id,
        income=Income(id=1, salary=5000.0, investments=200.0, business_income=0.0, financial_summary_id=1),
        expenses=Expenses(
            id=1,
            rent_mortgage=1200.0,
            utilities=200.0,
            insurance=150.0,
            loan_payments=300.0,
            groceries=400.0,
            transportation=150.0,
            subscriptions=50.0,
            entertainment=100.0,
            financial_summary_id=1,
        ),
    )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class DemoDataStore:
    """
    Seeded in-memory stand-in for the dashboard backend's persistence.

    Bucket and transaction fields arrive in wire (camelCase) form, exactly as
    the request body would carry them.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None, seed: bool = True) -> None:
        self._clock = clock or _utcnow
        now = self._clock()
        self._buckets: List[Bucket] = _seed_buckets(now) if seed else []
        self._transactions: List[Transaction] = _seed_transactions(now) if seed else []
        self._summaries: Dict[int, FinancialSummary] = {1: seed_financial_summary(1)} if seed else {}
        self._next_id = 4 if seed else 1

    def next_id(self) -> int:
        allocated = self._next_id
        self._next_id += 1
        return allocated

    # ------------------------------------------------------------------ #
    # Buckets
    # ------------------------------------------------------------------ #
    def list_buckets(self, user_id: int) -> List[Bucket]:
        return [b for b in self._buckets if b.user_id == user_id]

    def get_bucket(self, bucket_id: int, user_id: int) -> ApiResult:
        bucket = self._find_bucket(bucket_id, user_id)
        if bucket is None:
            return ApiResult.not_found("Bucket not found")
        return ApiResult.success(bucket)

    def create_bucket(self, user_id: int, fields: Dict[str, Any]) -> Bucket:
        deadline = fields.get("deadline") or to_iso(self._clock() + timedelta(days=DEFAULT_DEADLINE_DAYS))
        bucket = Bucket(
            id=self.next_id(),
            user_id=user_id,
            name=str(fields.get("name") or ""),
            target_amount=coerce_number(fields.get("targetAmount"), 0.0),
            current_saved_amount=coerce_number(fields.get("currentSavedAmount"), 0.0),
            priority_score=coerce_number(fields.get("priorityScore"), DEFAULT_PRIORITY),
            deadline=str(deadline),
            status=fields.get("status") or BucketStatus.IN_PROGRESS.value,
        )
        self._buckets.append(bucket)
        logger.info("Created bucket id=%s user=%s name=%r", bucket.id, user_id, bucket.name)
        return bucket

    def update_priority(self, bucket_id: int, user_id: int, new_priority: Any) -> ApiResult:
        """Overwrite a bucket's priority.

        ``new_priority`` is the raw value or a ``{"priorityScore": value}`` object;
        anything else is rejected without touching the bucket.
        """
        if isinstance(new_priority, dict):
            new_priority = new_priority.get("priorityScore")
        if new_priority is None or isinstance(new_priority, (list, dict)) or str(new_priority).strip() == "":
            return ApiResult.validation_failed(PRIORITY_REQUIRED)
        bucket = self._find_bucket(bucket_id, user_id)
        if bucket is None:
            return ApiResult.not_found("Bucket not found")
        bucket.priority_score = coerce_number(new_priority, DEFAULT_PRIORITY)
        return ApiResult.success(bucket)

    def delete_bucket(self, bucket_id: int, user_id: int) -> ApiResult:
        bucket = self._find_bucket(bucket_id, user_id)
        if bucket is None:
            return ApiResult.not_found("Bucket not found")
        self._buckets.remove(bucket)
        logger.info("Deleted bucket id=%s user=%s", bucket_id, user_id)
        return ApiResult.success(True)

    def _find_bucket(self, bucket_id: int, user_id: int) -> Optional[Bucket]:
        for bucket in self._buckets:
            if bucket.id == bucket_id and bucket.user_id == user_id:
                return bucket
        return None

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #
    def list_transactions(self, user_id: int) -> List[Transaction]:
        return [t for t in self._transactions if t.user_id == user_id]

    def list_all_transactions(self) -> List[Transaction]:
        return list(self._transactions)

    def create_transaction(self, user_id: int, fields: Dict[str, Any]) -> Transaction:
        transaction = Transaction(
            id=self.next_id(),
            user_id=user_id,
            amount=coerce_number(fields.get("amount"), 0.0),
            description=str(fields.get("description") or DEFAULT_DESCRIPTION),
            category=fields.get("category") or DEFAULT_CATEGORY,
            transaction_date=str(fields.get("transactionDate") or to_iso(self._clock())),
            reference=fields.get("reference") or "",
            notes=fields.get("notes") or "",
            is_reconciled=bool(fields.get("isReconciled") or False),
        )
        self._transactions.append(transaction)
        logger.info("Created transaction id=%s user=%s amount=%s", transaction.id, user_id, transaction.amount)
        return transaction

    # ------------------------------------------------------------------ #
    # Recommendations & summaries
    # ------------------------------------------------------------------ #
    def list_recommendations(self) -> List[Recommendation]:
        return list(_SEED_RECOMMENDATIONS)

    def income_analysis(self) -> IncomeAnalysis:
        return SEED_INCOME_ANALYSIS.model_copy()

    def expense_analysis(self) -> ExpenseAnalysis:
        return SEED_EXPENSE_ANALYSIS.model_copy()

    def analysis_summary(self) -> AnalysisSummary:
        return SEED_ANALYSIS_SUMMARY.model_copy()

    def find_financial_summary(self, user_id: int) -> Optional[FinancialSummary]:
        return self._summaries.get(user_id)

    def financial_summary_for(self, user_id: int) -> FinancialSummary:
        summary = self._summaries.get(user_id)
        if summary is None:
            summary = seed_financial_summary(user_id)
            self._summaries[user_id] = summary
        return summary

    def save_financial_summary(self, user_id: int, fields: Dict[str, Any]) -> FinancialSummary:
        existing = self._summaries.get(user_id)
        summary_id = existing.id if existing is not None else self.next_id()
        income = fields.get("income") or {}
        expenses = fields.get("expenses") or {}
        summary = FinancialSummary(
            id=summary_id,
            savings_balance=coerce_number(fields.get("savingsBalance")),
            investment_balance=coerce_number(fields.get("investmentBalance")),
            debt_balance=coerce_number(fields.get("debtBalance")),
            user_id=user_id,
            income=Income(
                id=summary_id,
                salary=coerce_number(income.get("salary")),
                investments=coerce_number(income.get("investments")),
                business_income=coerce_number(income.get("businessIncome")),
                financial_summary_id=summary_id,
            ),
            expenses=Expenses(
                id=summary_id,
                rent_mortgage=coerce_number(expenses.get("rentMortgage")),
                utilities=coerce_number(expenses.get("utilities")),
                insurance=coerce_number(expenses.get("insurance")),
                loan_payments=coerce_number(expenses.get("loanPayments")),
                groceries=coerce_number(expenses.get("groceries")),
                transportation=coerce_number(expenses.get("transportation")),
                subscriptions=coerce_number(expenses.get("subscriptions")),
                entertainment=coerce_number(expenses.get("entertainment")),
                financial_summary_id=summary_id,
            ),
        )
        self._summaries[user_id] = summary
        logger.info("Saved financial summary id=%s user=%s", summary_id, user_id)
        return summary
