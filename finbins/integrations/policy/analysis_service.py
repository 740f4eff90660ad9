"""
AI analysis insights for the analysis page.

Each insight is a GET on ``/ai-analysis/<topic>/{userId}``. Synthetic sessions
whose call fails still get the stock demo text; real sessions see the error.
"""

from __future__ import annotations

import logging
from typing import Type, TypeVar

from finbins.integrations.clients.mocks.demo_store import (
    SEED_ANALYSIS_SUMMARY,
    SEED_EXPENSE_ANALYSIS,
    SEED_INCOME_ANALYSIS,
)
from finbins.integrations.contracts.interfaces import (
    AnalysisSummary,
    ExpenseAnalysis,
    IncomeAnalysis,
    WireModel,
)
from finbins.integrations.dispatcher import RequestDispatcher
from finbins.integrations.policy.response_wrappers import ApiError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=WireModel)


class AnalysisService:
    def __init__(self, dispatcher: RequestDispatcher) -> None:
        self.dispatcher = dispatcher

    async def income_analysis(self) -> IncomeAnalysis:
        return await self._insight("income", IncomeAnalysis, SEED_INCOME_ANALYSIS)

    async def expense_analysis(self) -> ExpenseAnalysis:
        return await self._insight("expenses", ExpenseAnalysis, SEED_EXPENSE_ANALYSIS)

    async def summary(self) -> AnalysisSummary:
        return await self._insight("summary", AnalysisSummary, SEED_ANALYSIS_SUMMARY)

    async def _insight(self, topic: str, model: Type[M], demo_default: M) -> M:
        user_id = self.dispatcher.storage.get_user_profile().id
        session = self.dispatcher.current_session()
        try:
            data = await self.dispatcher.request(f"/ai-analysis/{topic}/{user_id}", session=session)
        except ApiError as exc:
            if not session.is_synthetic:
                raise
            logger.warning("Failed to load %s analysis (%s); using demo text", topic, exc)
            return demo_default.model_copy()
        if session.is_synthetic and not data:
            return demo_default.model_copy()
        return model.model_validate(data or {})
