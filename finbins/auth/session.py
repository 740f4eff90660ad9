"""
Login, registration and logout for the dashboard client.

Demo accounts never touch the network: a synthetic token is fabricated and
stored locally. Real accounts go through ``/auth/login`` and
``/auth/register``. When ``session.demo_fallback_on_failure`` is enabled, a
failed real call falls back to a fabricated demo session instead of raising.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from finbins.auth.credentials import SessionContext, make_synthetic_token
from finbins.database.local_storage import LocalStorage
from finbins.integrations.contracts.interfaces import AuthResponse, UserProfile
from finbins.integrations.dispatcher import RequestDispatcher
from finbins.integrations.policy.response_wrappers import ApiError

logger = logging.getLogger(__name__)

FALLBACK_USER_ID = 999


@dataclass(frozen=True)
class DemoAccount:
    id: int
    name: str
    email: str
    password: str


DEMO_ACCOUNTS: List[DemoAccount] = [
    DemoAccount(id=1, name="Demo User", email="demo@example.com", password="password123"),
    DemoAccount(id=2, name="John Doe", email="john@example.com", password="password123"),
    DemoAccount(id=3, name="Jane Smith", email="jane@example.com", password="password123"),
]


def find_demo_account(email: str, password: str) -> Optional[DemoAccount]:
    wanted = (email or "").strip().lower()
    for account in DEMO_ACCOUNTS:
        if account.email.lower() == wanted and account.password == password:
            return account
    return None


class AuthService:
    def __init__(self, dispatcher: RequestDispatcher, rng: Optional[random.Random] = None) -> None:
        self.dispatcher = dispatcher
        self.storage: LocalStorage = dispatcher.storage
        self.config = dispatcher.config
        self._rng = rng or random.Random()

    def current_session(self) -> SessionContext:
        return self.dispatcher.current_session()

    def logout(self) -> None:
        self.storage.clear_session()

    async def login(self, email: str, password: str) -> SessionContext:
        account = find_demo_account(email, password)
        if account is not None:
            logger.info("Demo login for %s", account.email)
            return self._start_demo_session(UserProfile(id=account.id, name=account.name, email=account.email))

        try:
            data = await self.dispatcher.request(
                "/auth/login",
                method="POST",
                body={"email": email, "password": password},
                session=SessionContext.anonymous(self.config.session.default_user_id),
            )
        except ApiError as exc:
            if not self.config.session.demo_fallback_on_failure:
                raise
            logger.warning("API login failed (%s); falling back to a demo session", exc)
            return self._start_demo_session(UserProfile(id=FALLBACK_USER_ID, name="Fallback User", email=email))

        return self._start_real_session(AuthResponse.model_validate(data))

    async def register(self, name: str, email: str, password: str) -> SessionContext:
        try:
            data = await self.dispatcher.request(
                "/auth/register",
                method="POST",
                body={"name": name, "email": email, "password": password},
                session=SessionContext.anonymous(self.config.session.default_user_id),
            )
        except ApiError as exc:
            if not self.config.session.demo_fallback_on_failure:
                raise
            logger.warning("API registration failed (%s); falling back to a demo session", exc)
            return self._start_demo_session(UserProfile(id=self._random_demo_id(), name=name, email=email))

        return self._start_real_session(AuthResponse.model_validate(data))

    def register_demo(self) -> SessionContext:
        profile = UserProfile(
            id=self._random_demo_id(),
            name="New Demo User",
            email=f"demo{self._rng.randrange(1000)}@example.com",
        )
        return self._start_demo_session(profile)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _random_demo_id(self) -> int:
        # 10..1009 keeps clear of the fixed demo accounts
        return self._rng.randrange(1000) + 10

    def _start_demo_session(self, profile: UserProfile) -> SessionContext:
        token = make_synthetic_token(profile.id, prefix=self.config.session.synthetic_prefix)
        self.storage.save_session(token, profile)
        return SessionContext(is_synthetic=True, user_id=profile.id, raw_token=token)

    def _start_real_session(self, auth: AuthResponse) -> SessionContext:
        self.storage.save_session(auth.token, auth.profile())
        logger.info("Logged in as user %s", auth.id)
        return SessionContext(is_synthetic=False, user_id=auth.id, raw_token=auth.token)
