import httpx
import pytest

from finbins.integrations.contracts.interfaces import UserProfile
from finbins.integrations.dispatcher import RequestDispatcher
from finbins.integrations.clients.real_http.api_client import RealApiClient
from finbins.integrations.policy.account_service import (
    AccountService,
    validate_password_change,
    validate_profile,
)
from finbins.integrations.policy.response_wrappers import (
    HttpStatusError,
    NotFoundError,
    RequestValidationError,
    SessionError,
)

REAL_TOKEN = "demo-token-1-1700000000000"


@pytest.fixture
def demo_account(demo_dispatcher):
    return AccountService(demo_dispatcher)


@pytest.fixture
def real_account(real_dispatcher, storage):
    storage.save_session(REAL_TOKEN, UserProfile(id=1, name="John Doe", email="john@example.com"))
    return AccountService(real_dispatcher)


class TestValidation:
    @pytest.mark.parametrize(
        "name,email,message",
        [
            ("J", "j@example.com", "Name must be at least 2 characters."),
            ("  J  ", "j@example.com", "Name must be at least 2 characters."),
            ("Jo", "not-an-email", "Please enter a valid email address."),
            ("Jo", "", "Please enter a valid email address."),
        ],
    )
    def test_profile(self, name, email, message):
        with pytest.raises(RequestValidationError) as excinfo:
            validate_profile(name, email)
        assert excinfo.value.message == message

    @pytest.mark.parametrize(
        "current,new,confirm,message",
        [
            ("", "longenough", "longenough", "Current password is required."),
            ("old", "short", "short", "Password must be at least 8 characters."),
            ("old", "longenough", "longenougH", "Passwords do not match"),
        ],
    )
    def test_password_change(self, current, new, confirm, message):
        with pytest.raises(RequestValidationError) as excinfo:
            validate_password_change(current, new, confirm)
        assert excinfo.value.message == message

    @pytest.mark.asyncio
    async def test_invalid_input_sends_nothing(self, storage, recording_transport):
        transport = recording_transport(lambda request: httpx.Response(200, json={"success": True}))
        storage.save_session(REAL_TOKEN, UserProfile(id=1, name="John Doe", email="john@example.com"))
        account = AccountService(
            RequestDispatcher(storage, real_client=RealApiClient("https://finbins.test/api", transport=transport))
        )

        with pytest.raises(RequestValidationError):
            await account.update_profile("J", "john@example.com")
        with pytest.raises(RequestValidationError):
            await account.change_password("password", "short", "short")

        assert transport.requests == []


class TestDemoSession:
    @pytest.mark.asyncio
    async def test_update_profile_rewrites_stored_user_and_keeps_token(self, demo_account, demo_storage):
        token = demo_storage.get_token()

        updated = await demo_account.update_profile("  Demo Person ", "person@example.com ")

        assert updated == UserProfile(id=1, name="Demo Person", email="person@example.com")
        assert demo_storage.get_user_profile() == updated
        assert demo_storage.get_token() == token

    @pytest.mark.asyncio
    async def test_change_password_is_acknowledged(self, demo_account):
        assert await demo_account.change_password("anything", "newpassword", "newpassword") is None

    @pytest.mark.asyncio
    async def test_delete_account_clears_session(self, demo_account, demo_storage):
        await demo_account.delete_account()

        assert demo_storage.get_token() is None
        with pytest.raises(SessionError):
            demo_storage.get_user_profile()

    @pytest.mark.asyncio
    async def test_no_profile_raises_session_error(self, storage):
        account = AccountService(RequestDispatcher(storage))
        with pytest.raises(SessionError):
            await account.delete_account()


class TestRealSession:
    @pytest.mark.asyncio
    async def test_update_profile(self, real_account, storage, backend_app):
        updated = await real_account.update_profile("Johnny Doe", "johnny@example.com")

        assert storage.get_user_profile() == updated
        record = backend_app.state.users.get(1)
        assert (record.name, record.email) == ("Johnny Doe", "johnny@example.com")

    @pytest.mark.asyncio
    async def test_change_password_checks_current_password(self, real_account, backend_app):
        with pytest.raises(HttpStatusError) as excinfo:
            await real_account.change_password("wrong-password", "brandnewpass", "brandnewpass")
        assert excinfo.value.status_code == 401
        assert excinfo.value.message == "Current password is incorrect"

        await real_account.change_password("password", "brandnewpass", "brandnewpass")
        assert backend_app.state.users.get(1).verify("brandnewpass")

    @pytest.mark.asyncio
    async def test_delete_account(self, real_account, storage, backend_app):
        await real_account.delete_account()

        assert backend_app.state.users.get(1) is None
        assert storage.get_token() is None

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_session(self, real_dispatcher, storage):
        storage.save_session(REAL_TOKEN, UserProfile(id=42, name="Gone", email="gone@example.com"))

        with pytest.raises(NotFoundError):
            await AccountService(real_dispatcher).delete_account()

        assert storage.get_token() == REAL_TOKEN
        assert storage.get_user_profile().id == 42
