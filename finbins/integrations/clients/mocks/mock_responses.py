"""
Mock response generator.

Answers dashboard API calls for synthetic sessions from a DemoDataStore.
Routes are an explicit table of (method, path template) -> handler compiled
once at construction; payloads are shaped exactly like the real backend's.

Path templates use ``{name}`` for any segment and ``{name:int}`` for numeric
segments. A leading ``/api`` on the endpoint is ignored.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple

from finbins.auth.credentials import SessionContext
from finbins.integrations.clients.mocks.demo_store import DemoDataStore
from finbins.integrations.policy.response_wrappers import ApiResult

logger = logging.getLogger(__name__)

MUTATING_METHODS = frozenset({"POST", "PUT", "DELETE"})
STORE_BACKED_PREFIXES = ("/buckets", "/transactions")
UNSUPPORTED_MESSAGE = "Operation not supported in demo mode"

Handler = Callable[[SessionContext, Dict[str, str], Any], ApiResult]

_PARAM = re.compile(r"\{(\w+)(?::(int))?\}")


def compile_template(template: str) -> Pattern[str]:
    def _group(match: "re.Match[str]") -> str:
        name, kind = match.group(1), match.group(2)
        return rf"(?P<{name}>\d+)" if kind == "int" else rf"(?P<{name}>[^/]+)"

    return re.compile("^" + _PARAM.sub(_group, template) + "/?$")


def normalize_path(endpoint: str) -> str:
    path = endpoint.split("?", 1)[0]
    if path == "/api" or path.startswith("/api/"):
        path = path[len("/api"):] or "/"
    return path


@dataclass(frozen=True)
class Route:
    method: str
    template: str
    handler: Handler
    pattern: Pattern[str]

    def match(self, method: str, path: str) -> Optional[Dict[str, str]]:
        if method != self.method:
            return None
        m = self.pattern.match(path)
        return m.groupdict() if m else None


class MockResponseGenerator:
    """Maps (endpoint, method) onto DemoDataStore operations."""

    def __init__(self, store: DemoDataStore) -> None:
        self.store = store
        self.routes: List[Route] = [
            self._route("GET", "/financial-summary/{user_id}", self._financial_summary),
            self._route("GET", "/transactions", self._list_transactions),
            self._route("GET", "/transactions/{user_id}", self._list_transactions),
            self._route("POST", "/transactions", self._create_transaction),
            self._route("GET", "/buckets/{user_id}/{bucket_id:int}", self._get_bucket),
            self._route("GET", "/buckets/{user_id}", self._list_buckets),
            self._route("POST", "/buckets", self._create_bucket),
            self._route("PUT", "/buckets/{user_id}/{bucket_id:int}/priority", self._update_priority),
            self._route("DELETE", "/buckets/{user_id}/{bucket_id:int}", self._delete_bucket),
            self._route("GET", "/ai-analysis/recommendations/{user_id}", self._recommendations),
            self._route("GET", "/ai-analysis/income/{user_id}", self._income_analysis),
            self._route("GET", "/ai-analysis/expenses/{user_id}", self._expense_analysis),
            self._route("GET", "/ai-analysis/summary/{user_id}", self._analysis_summary),
        ]

    @staticmethod
    def _route(method: str, template: str, handler: Handler) -> Route:
        return Route(method=method, template=template, handler=handler, pattern=compile_template(template))

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #
    def resolve(self, method: str, endpoint: str) -> Optional[Tuple[Route, Dict[str, str]]]:
        path = normalize_path(endpoint)
        for route in self.routes:
            params = route.match(method.upper(), path)
            if params is not None:
                return route, params
        return None

    @staticmethod
    def is_store_backed(endpoint: str) -> bool:
        path = normalize_path(endpoint)
        return any(path == p or path.startswith(p + "/") for p in STORE_BACKED_PREFIXES)

    def handle(self, endpoint: str, method: str, body: Any, session: SessionContext) -> ApiResult:
        method = method.upper()
        resolved = self.resolve(method, endpoint)
        if resolved is None:
            if method in MUTATING_METHODS:
                logger.warning("No demo route for %s %s", method, endpoint)
                return ApiResult.validation_failed(UNSUPPORTED_MESSAGE)
            logger.info("No demo data for %s %s; returning empty object", method, endpoint)
            return ApiResult.success({})
        route, params = resolved
        return route.handler(session, params, body)

    # ------------------------------------------------------------------ #
    # Handlers (user id always comes from the session, not the path)
    # ------------------------------------------------------------------ #
    def _financial_summary(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        return ApiResult.success(self.store.financial_summary_for(session.user_id).to_wire())

    def _list_transactions(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        return ApiResult.success([t.to_wire() for t in self.store.list_transactions(session.user_id)])

    def _create_transaction(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        created = self.store.create_transaction(session.user_id, body if isinstance(body, dict) else {})
        return ApiResult.success(created.to_wire())

    def _get_bucket(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        result = self.store.get_bucket(int(params["bucket_id"]), session.user_id)
        if not result:
            return result
        return ApiResult.success(result.value.to_wire())

    def _list_buckets(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        return ApiResult.success([b.to_wire() for b in self.store.list_buckets(session.user_id)])

    def _create_bucket(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        created = self.store.create_bucket(session.user_id, body if isinstance(body, dict) else {})
        return ApiResult.success(created.to_wire())

    def _update_priority(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        result = self.store.update_priority(int(params["bucket_id"]), session.user_id, body)
        if not result:
            return result
        return ApiResult.success({"success": True, "bucket": result.value.to_wire()})

    def _delete_bucket(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        result = self.store.delete_bucket(int(params["bucket_id"]), session.user_id)
        if not result:
            return result
        return ApiResult.success({"success": True})

    def _recommendations(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        return ApiResult.success([r.to_wire() for r in self.store.list_recommendations()])

    def _income_analysis(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        return ApiResult.success(self.store.income_analysis().to_wire())

    def _expense_analysis(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        return ApiResult.success(self.store.expense_analysis().to_wire())

    def _analysis_summary(self, session: SessionContext, params: Dict[str, str], body: Any) -> ApiResult:
        return ApiResult.success(self.store.analysis_summary().to_wire())
