import httpx
import pytest

from finbins.integrations.clients.mocks.demo_store import (
    SEED_ANALYSIS_SUMMARY,
    SEED_EXPENSE_ANALYSIS,
    SEED_INCOME_ANALYSIS,
)
from finbins.integrations.clients.real_http.api_client import RealApiClient
from finbins.integrations.contracts.interfaces import IncomeAnalysis, UserProfile
from finbins.integrations.dispatcher import RequestDispatcher
from finbins.integrations.policy.analysis_service import AnalysisService
from finbins.integrations.policy.response_wrappers import HttpStatusError, TransportError

REAL_TOKEN = "demo-token-1-1700000000000"


@pytest.fixture
def demo_analysis(demo_dispatcher):
    return AnalysisService(demo_dispatcher)


def _real_storage(storage):
    storage.save_session(REAL_TOKEN, UserProfile(id=1, name="John Doe", email="john@example.com"))
    return storage


@pytest.mark.asyncio
async def test_demo_session_serves_stock_insights(demo_analysis):
    assert await demo_analysis.income_analysis() == SEED_INCOME_ANALYSIS
    assert await demo_analysis.expense_analysis() == SEED_EXPENSE_ANALYSIS
    assert await demo_analysis.summary() == SEED_ANALYSIS_SUMMARY


@pytest.mark.asyncio
async def test_demo_session_without_route_falls_back_to_stock_text(demo_dispatcher):
    demo_dispatcher.mock.routes = [r for r in demo_dispatcher.mock.routes if "/ai-analysis/income/" not in r.template]

    income = await AnalysisService(demo_dispatcher).income_analysis()

    assert income == SEED_INCOME_ANALYSIS
    assert income is not SEED_INCOME_ANALYSIS


@pytest.mark.asyncio
async def test_demo_session_error_falls_back_to_stock_text(demo_dispatcher, monkeypatch):
    async def _fail(*args, **kwargs):
        raise TransportError("Connection refused")

    monkeypatch.setattr(demo_dispatcher, "request", _fail)

    assert await AnalysisService(demo_dispatcher).expense_analysis() == SEED_EXPENSE_ANALYSIS


@pytest.mark.asyncio
async def test_real_session_reads_backend(real_dispatcher, storage):
    _real_storage(storage)
    analysis = AnalysisService(real_dispatcher)

    summary = await analysis.summary()

    assert summary.savings_rate == SEED_ANALYSIS_SUMMARY.savings_rate
    assert summary.savings_goals == SEED_ANALYSIS_SUMMARY.savings_goals


@pytest.mark.asyncio
async def test_real_session_error_propagates(storage, recording_transport):
    transport = recording_transport(lambda request: httpx.Response(500, json={"message": "Internal server error"}))
    analysis = AnalysisService(
        RequestDispatcher(_real_storage(storage), real_client=RealApiClient("https://finbins.test/api", transport=transport))
    )

    with pytest.raises(HttpStatusError) as excinfo:
        await analysis.income_analysis()

    assert excinfo.value.message == "Internal server error"
    assert str(transport.requests[0].url) == "https://finbins.test/api/ai-analysis/income/1"


@pytest.mark.asyncio
async def test_real_session_partial_payload_keeps_defaults(storage, recording_transport):
    transport = recording_transport(lambda request: httpx.Response(200, json={"summary": "Steady income."}))
    analysis = AnalysisService(
        RequestDispatcher(_real_storage(storage), real_client=RealApiClient("https://finbins.test/api", transport=transport))
    )

    assert await analysis.income_analysis() == IncomeAnalysis(summary="Steady income.", diversification="")
