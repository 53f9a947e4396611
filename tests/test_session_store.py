import pytest

from shopgenie.db.sqlite import MemoryGateway
from shopgenie.models import UserIdentity
from shopgenie.state.session import DEMO_USER, SessionStore


@pytest.fixture
def session() -> SessionStore:
    store = SessionStore(MemoryGateway())
    store.load()
    return store


def test_starts_anonymous(session) -> None:
    assert session.user is None
    assert session.signed_in is False


def test_sign_in_defaults_to_demo_identity(session) -> None:
    assert session.sign_in() == DEMO_USER


def test_sign_in_replaces_identity_wholesale(session) -> None:
    session.sign_in()
    sam = UserIdentity(id="u2", name="Sam Lee", email="sam@example.com")
    session.sign_in(sam)
    assert session.user == sam
    assert session.user.avatar is None


def test_update_profile_merges_supplied_fields(session) -> None:
    session.sign_in()
    user = session.update_profile(name="Alex J.")
    assert user.name == "Alex J."
    assert user.email == DEMO_USER.email
    assert user.avatar == DEMO_USER.avatar
    assert user.id == DEMO_USER.id


def test_update_profile_when_signed_out_is_noop(session) -> None:
    assert session.update_profile(name="Ghost") is None
    assert session.user is None


def test_update_profile_rejects_unknown_fields(session) -> None:
    session.sign_in()
    with pytest.raises(TypeError):
        session.update_profile(password="hunter2")
    assert session.user == DEMO_USER


def test_sign_out_clears_persisted_identity() -> None:
    gateway = MemoryGateway()
    session = SessionStore(gateway)
    session.sign_in()
    assert gateway.load("session") == DEMO_USER.to_dict()

    session.sign_out()
    assert session.user is None
    assert gateway.load("session") is None
