from datetime import datetime, timezone

import pytest

from finbins.integrations.contracts.interfaces import (
    Bucket,
    Expenses,
    FinancialSummary,
    Income,
    Transaction,
    UserProfile,
)
from finbins.integrations.policy.finance_service import (
    FinanceService,
    bucket_progress,
    clamp_priority,
    filter_transactions,
    monthly_savings,
    net_worth,
    parse_timestamp,
    period_start,
    priority_label,
    sort_by_priority,
    transaction_categories,
    transaction_totals,
)
from finbins.integrations.policy.response_wrappers import NotFoundError, SessionError


@pytest.fixture
def demo_finance(demo_dispatcher):
    return FinanceService(demo_dispatcher)


@pytest.fixture
def real_finance(real_dispatcher, storage):
    storage.save_session("demo-token-1-1700000000000", UserProfile(id=1, name="John Doe", email="john@example.com"))
    return FinanceService(real_dispatcher)


def _bucket(bucket_id: int, score: float) -> Bucket:
    return Bucket(id=bucket_id, user_id=1, name=f"b{bucket_id}", target_amount=1, priority_score=score, deadline="")


class TestPriorityHelpers:
    @pytest.mark.parametrize(
        "score,expected",
        [(0.9, "High"), (0.7, "High"), (0.69, "Medium"), (0.4, "Medium"), (0.39, "Low"), (0.0, "Low")],
    )
    def test_priority_label(self, score, expected):
        assert priority_label(score) == expected

    def test_clamp_priority(self):
        assert clamp_priority(1.3) == 1.0
        assert clamp_priority(-0.2) == 0.0
        assert clamp_priority(0.45) == 0.45

    def test_sort_is_descending_and_stable(self):
        ordered = sort_by_priority([_bucket(1, 0.5), _bucket(2, 0.9), _bucket(3, 0.5)])
        assert [b.id for b in ordered] == [2, 1, 3]


class TestDemoSession:
    @pytest.mark.asyncio
    async def test_buckets_sorted_by_priority(self, demo_finance):
        buckets = await demo_finance.list_buckets()
        assert [b.name for b in buckets] == ["Emergency Fund", "New Car", "Vacation"]

    @pytest.mark.asyncio
    async def test_create_bucket_and_adjust_priority(self, demo_finance, store):
        bucket = await demo_finance.create_bucket("Bike", "800", "2027-03-01T00:00:00.000Z")
        assert bucket.target_amount == 800
        assert bucket.priority_score == 0.5

        raised = await demo_finance.adjust_priority(bucket)
        assert raised == 0.6
        stored = [b for b in store.list_buckets(1) if b.id == bucket.id][0]
        assert stored.priority_score == 0.6

    @pytest.mark.asyncio
    async def test_adjust_priority_stays_within_bounds(self, demo_finance):
        emergency = (await demo_finance.list_buckets())[0]
        assert await demo_finance.adjust_priority(emergency, step=0.2) == 1.0

    @pytest.mark.asyncio
    async def test_delete_missing_bucket_raises_not_found(self, demo_finance):
        await demo_finance.delete_bucket(1)
        with pytest.raises(NotFoundError):
            await demo_finance.delete_bucket(1)

    @pytest.mark.asyncio
    async def test_summary_transactions_and_recommendations(self, demo_finance):
        summary = await demo_finance.get_financial_summary()
        assert summary.user_id == 1
        assert summary.total_income == 5200.0

        transactions = await demo_finance.list_transactions()
        assert len(transactions) == 3

        created = await demo_finance.create_transaction({"amount": -4.5, "description": "Coffee"})
        assert created.amount == -4.5
        assert len(await demo_finance.list_transactions()) == 4

        recommendations = await demo_finance.get_recommendations()
        assert recommendations[0].title == "Increase Emergency Fund"

    @pytest.mark.asyncio
    async def test_onboarding_submission_is_acknowledged(self, demo_finance):
        assert await demo_finance.add_financial_summary({"savingsBalance": 10}) == {"success": True}

    @pytest.mark.asyncio
    async def test_missing_profile_raises_session_error(self, demo_dispatcher):
        demo_dispatcher.storage.remove_item("user")
        with pytest.raises(SessionError) as excinfo:
            await FinanceService(demo_dispatcher).list_buckets()
        assert str(excinfo.value) == "User information not found"


class TestRealSession:
    @pytest.mark.asyncio
    async def test_full_flow_against_backend(self, real_finance):
        buckets = await real_finance.list_buckets()
        assert buckets[0].name == "Emergency Fund"

        bucket = await real_finance.create_bucket("Bike", 800, "2027-03-01T00:00:00.000Z", priority_score=0.3)
        assert await real_finance.update_priority(bucket.id, 0.95) == 0.95
        refreshed = await real_finance.list_buckets()
        assert refreshed[0].id == bucket.id

        await real_finance.delete_bucket(bucket.id)
        assert bucket.id not in [b.id for b in await real_finance.list_buckets()]

    @pytest.mark.asyncio
    async def test_onboarding_then_summary(self, real_finance):
        await real_finance.add_financial_summary(
            {"savingsBalance": 250, "income": {"salary": 4000}, "expenses": {"rentMortgage": 1500}}
        )
        summary = await real_finance.get_financial_summary()
        assert summary.savings_balance == 250
        assert summary.total_income == 4000
        assert summary.total_expenses == 1500

    @pytest.mark.asyncio
    async def test_create_transaction_requires_date_on_backend(self, real_finance):
        created = await real_finance.create_transaction(
            {"amount": 20, "description": "Refund", "transactionDate": "2026-10-01T00:00:00.000Z"}
        )
        assert created.user_id == 1
        assert len(await real_finance.list_transactions()) == 4


NOW = datetime(2026, 3, 31, 15, 30, tzinfo=timezone.utc)


def _tx(tx_id: int, amount: float, description: str, category, date: str) -> Transaction:
    return Transaction(
        id=tx_id, user_id=1, amount=amount, description=description, category=category, transaction_date=date
    )


LEDGER = [
    _tx(1, 3000, "Salary deposit", "Income", "2026-03-31T09:00:00.000Z"),
    _tx(2, -85.5, "Grocery store", "Food", "2026-03-27T12:00:00.000Z"),
    _tx(3, -1200, "Rent", "Housing", "2026-03-01T00:00:00.000Z"),
    _tx(4, -40, "Cinema", None, "2025-06-01T00:00:00.000Z"),
    _tx(5, 120, "Refund", "Food", "not a date"),
]


class TestDashboardFigures:
    @pytest.mark.parametrize("saved,target,expected", [(500, 1000, 50), (1, 3, 33), (1, 8, 13), (1500, 1000, 150)])
    def test_bucket_progress(self, saved, target, expected):
        bucket = Bucket(
            id=1, user_id=1, name="b", target_amount=target, current_saved_amount=saved, deadline=""
        )
        assert bucket_progress(bucket) == expected

    def test_bucket_progress_without_target(self):
        assert bucket_progress(_bucket(1, 0.5).model_copy(update={"target_amount": 0})) == 0

    @pytest.mark.asyncio
    async def test_net_worth_and_monthly_savings(self, demo_finance):
        summary = await demo_finance.get_financial_summary()
        assert net_worth(summary) == (
            summary.savings_balance + summary.investment_balance - summary.debt_balance
        )
        assert monthly_savings(summary) == summary.total_income - summary.total_expenses

    def test_net_worth_can_be_negative(self):
        summary = FinancialSummary(
            id=1, user_id=1, savings_balance=100, investment_balance=50, debt_balance=400,
            income=Income(salary=2000), expenses=Expenses(rent_mortgage=1500, groceries=600),
        )
        assert net_worth(summary) == -250
        assert monthly_savings(summary) == -100


class TestTransactionFilters:
    def test_search_matches_description_or_category(self):
        assert [t.id for t in filter_transactions(LEDGER, search="FOOD")] == [2, 5]
        assert [t.id for t in filter_transactions(LEDGER, search="rent")] == [3]

    def test_category_is_exact(self):
        assert [t.id for t in filter_transactions(LEDGER, category="Food")] == [2, 5]
        assert filter_transactions(LEDGER, category="food") == []

    @pytest.mark.parametrize(
        "period,expected",
        [
            ("today", [1]),
            ("week", [1, 2]),
            ("month", [1, 2, 3]),
            ("year", [1, 2, 3, 4]),
            ("all", [1, 2, 3, 4, 5]),
            (None, [1, 2, 3, 4, 5]),
        ],
    )
    def test_period(self, period, expected):
        assert [t.id for t in filter_transactions(LEDGER, period=period, now=NOW)] == expected

    def test_month_back_clamps_to_shorter_month(self):
        assert period_start("month", NOW) == datetime(2026, 2, 28, 15, 30, tzinfo=timezone.utc)
        leap_day = datetime(2028, 2, 29, tzinfo=timezone.utc)
        assert period_start("year", leap_day) == datetime(2027, 2, 28, tzinfo=timezone.utc)

    def test_filters_combine(self):
        assert [t.id for t in filter_transactions(LEDGER, search="o", category="Food", period="week", now=NOW)] == [2]

    def test_categories_and_totals(self):
        assert transaction_categories(LEDGER) == ["Income", "Food", "Housing"]
        totals = transaction_totals(LEDGER)
        assert totals.income == 3120
        assert totals.expenses == 1325.5
        assert totals.net == 1794.5
        assert transaction_totals([]).net == 0

    def test_parse_timestamp(self):
        assert parse_timestamp("2026-03-31T09:00:00.000Z") == datetime(2026, 3, 31, 9, tzinfo=timezone.utc)
        assert parse_timestamp("2026-03-31") == datetime(2026, 3, 31, tzinfo=timezone.utc)
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp("") is None
