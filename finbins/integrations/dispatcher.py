"""
Request dispatcher: the single entry point for dashboard API calls.

Per call it resolves the session (explicit SessionContext, else the stored
token), then either answers from the demo store (synthetic sessions) or makes
one real HTTP call. Both paths produce an ApiResult; ``request`` unwraps it
and raises the ApiError so callers only need one ``except`` clause.

Selection of mock vs real happens HERE and nowhere else.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from finbins.auth.credentials import SessionContext
from finbins.database.local_storage import LocalStorage
from finbins.integrations.clients.mocks.demo_store import DemoDataStore
from finbins.integrations.clients.mocks.mock_responses import MUTATING_METHODS, MockResponseGenerator
from finbins.integrations.clients.real_http.api_client import RealApiClient
from finbins.integrations.policy.response_wrappers import ApiResult
from finbins.utils.config_loader import ClientConfig

logger = logging.getLogger(__name__)


class RequestDispatcher:
    def __init__(
        self,
        storage: LocalStorage,
        config: Optional[ClientConfig] = None,
        demo_store: Optional[DemoDataStore] = None,
        real_client: Optional[RealApiClient] = None,
    ) -> None:
        self.storage = storage
        self.config = config or ClientConfig()
        self.demo_store = demo_store or DemoDataStore()
        self.mock = MockResponseGenerator(self.demo_store)
        self.real_client = real_client or RealApiClient(self.config.api.base_url)

    def current_session(self) -> SessionContext:
        return SessionContext.from_token(
            self.storage.get_token(),
            prefix=self.config.session.synthetic_prefix,
            default_user_id=self.config.session.default_user_id,
        )

    async def send(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[SessionContext] = None,
    ) -> ApiResult:
        method = method.upper()
        session = session or self.current_session()

        if session.is_synthetic:
            logger.info("Using mock data for endpoint: %s %s", method, endpoint)
            if method in MUTATING_METHODS and not self.mock.is_store_backed(endpoint):
                return ApiResult.success({"success": True})
            return self.mock.handle(endpoint, method, body, session)

        return await self.real_client.send(method, endpoint, body=body, token=session.raw_token, headers=headers)

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[SessionContext] = None,
    ) -> Any:
        result = await self.send(endpoint, method=method, body=body, headers=headers, session=session)
        return result.unwrap()
