"""
Integrations layer.

Everything the dashboard uses to talk to its backend lives here:
- contracts/   wire models (camelCase on the wire)
- clients/     the in-memory demo backend (mocks) and the httpx client (real_http)
- policy/      result/error types and the typed finance, account and analysis services
- dispatcher   the single entry point that picks mock or real per session

Key rule:
- Callers MUST NOT talk to the backend directly; go through RequestDispatcher.
"""

from .contracts.interfaces import (
    AnalysisSummary,
    AuthResponse,
    Bucket,
    ChatRequest,
    ChatResponse,
    ExpenseAnalysis,
    Expenses,
    FinancialSummary,
    Income,
    IncomeAnalysis,
    Recommendation,
    Transaction,
    UserProfile,
)
from .policy.response_wrappers import (
    ApiError,
    ApiResult,
    ErrorKind,
    HttpStatusError,
    NotFoundError,
    RequestValidationError,
    SessionError,
    TransportError,
    coerce_number,
)

__all__ = [
    # contracts
    "AnalysisSummary", "AuthResponse", "Bucket", "ChatRequest", "ChatResponse",
    "ExpenseAnalysis", "Expenses", "IncomeAnalysis",
    "FinancialSummary", "Income", "Recommendation", "Transaction", "UserProfile",
    # results
    "ApiError", "ApiResult", "ErrorKind", "HttpStatusError", "NotFoundError",
    "RequestValidationError", "SessionError", "TransportError", "coerce_number",
]
