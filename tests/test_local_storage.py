import json

import pytest

from finbins.database.local_storage import FileLocalStorage, LocalStorage, open_storage
from finbins.integrations.contracts.interfaces import UserProfile
from finbins.integrations.policy.response_wrappers import SessionError


def test_session_round_trip():
    storage = LocalStorage()
    storage.save_session("dummy-token-2-1", UserProfile(id=2, name="John Doe", email="john@example.com"))

    assert storage.get_token() == "dummy-token-2-1"
    assert json.loads(storage.get_item("user")) == {"id": 2, "name": "John Doe", "email": "john@example.com"}
    assert storage.get_user_profile().id == 2

    storage.clear_session()
    assert storage.get_token() is None
    assert storage.get_item("user") is None


def test_empty_token_reads_as_none():
    storage = LocalStorage()
    storage.set_item("token", "")
    assert storage.get_token() is None


@pytest.mark.parametrize("raw", [None, "", "{not json", '{"name": "no id"}', "[]"])
def test_unreadable_profile_raises_session_error(raw):
    storage = LocalStorage()
    if raw is not None:
        storage.set_item("user", raw)
    with pytest.raises(SessionError) as excinfo:
        storage.get_user_profile()
    assert excinfo.value.message == "User information not found"


def test_file_storage_survives_restart(tmp_path):
    path = tmp_path / "session" / "storage.json"
    first = FileLocalStorage(path)
    first.save_session("server-token", UserProfile(id=5, name="Ada", email="ada@example.com"))

    second = FileLocalStorage(path)
    assert second.get_token() == "server-token"
    assert second.get_user_profile().name == "Ada"

    second.clear_session()
    assert FileLocalStorage(path).get_token() is None


def test_file_storage_ignores_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{{{", encoding="utf-8")

    storage = FileLocalStorage(path)
    assert storage.get_token() is None
    storage.set_item("token", "abc")
    assert json.loads(path.read_text(encoding="utf-8")) == {"token": "abc"}


def test_open_storage_picks_backend(tmp_path):
    assert type(open_storage()) is LocalStorage
    assert isinstance(open_storage(str(tmp_path / "s.json")), FileLocalStorage)
