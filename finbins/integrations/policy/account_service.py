"""
Account settings: profile update, password change and account deletion.

Input is checked locally first, mirroring the settings forms; a failed check
raises RequestValidationError before anything is sent.
"""

from __future__ import annotations

import logging
import re

from finbins.integrations.contracts.interfaces import UserProfile
from finbins.integrations.dispatcher import RequestDispatcher
from finbins.integrations.policy.response_wrappers import RequestValidationError

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 8

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_profile(name: str, email: str) -> None:
    if len((name or "").strip()) < MIN_NAME_LENGTH:
        raise RequestValidationError("Name must be at least 2 characters.")
    if not _EMAIL.match((email or "").strip()):
        raise RequestValidationError("Please enter a valid email address.")


def validate_password_change(current_password: str, new_password: str, confirm_password: str) -> None:
    if not current_password:
        raise RequestValidationError("Current password is required.")
    if len(new_password or "") < MIN_PASSWORD_LENGTH:
        raise RequestValidationError("Password must be at least 8 characters.")
    if new_password != confirm_password:
        raise RequestValidationError("Passwords do not match")


class AccountService:
    def __init__(self, dispatcher: RequestDispatcher) -> None:
        self.dispatcher = dispatcher
        self.storage = dispatcher.storage

    async def update_profile(self, name: str, email: str) -> UserProfile:
        """PUT the new name/email, then rewrite the stored profile to match."""
        validate_profile(name, email)
        profile = self.storage.get_user_profile()
        await self.dispatcher.request(
            f"/users/{profile.id}",
            method="PUT",
            body={"name": name.strip(), "email": email.strip()},
        )
        updated = profile.model_copy(update={"name": name.strip(), "email": email.strip()})
        self.storage.save_user_profile(updated)
        logger.info("Updated profile for user %s", profile.id)
        return updated

    async def change_password(self, current_password: str, new_password: str, confirm_password: str) -> None:
        validate_password_change(current_password, new_password, confirm_password)
        profile = self.storage.get_user_profile()
        await self.dispatcher.request(
            f"/users/{profile.id}/change-password",
            method="POST",
            body={"currentPassword": current_password, "newPassword": new_password},
        )

    async def delete_account(self) -> None:
        """DELETE the account; the local session is cleared only once that succeeds."""
        profile = self.storage.get_user_profile()
        await self.dispatcher.request(f"/users/{profile.id}", method="DELETE")
        self.storage.clear_session()
        logger.info("Deleted account for user %s", profile.id)
