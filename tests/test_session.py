import pytest

from cartadmin.errors import AuthError
from cartadmin.session import SessionGate, SessionState
from conftest import ADMIN, FakeGateway


@pytest.fixture
def provider():
    gw = FakeGateway()
    gw.identities = {"admin": ADMIN, "shopper": "shopper@example.in", "shouty": ADMIN.upper()}
    return gw


def test_admin_email_is_authorized(provider):
    gate = SessionGate(provider, admin_email=ADMIN)
    assert gate.sign_in("admin", "pw") is True
    assert gate.state is SessionState.AUTHORIZED
    assert gate.identity.email == ADMIN


@pytest.mark.parametrize("username", ["shopper", "shouty"])
def test_other_emails_stay_unauthenticated(provider, username):
    gate = SessionGate(provider, admin_email=ADMIN)
    assert gate.sign_in(username, "pw") is False
    assert gate.state is SessionState.UNAUTHENTICATED
    assert gate.identity is None
    assert gate.rejected.username == username


def test_no_identity_is_unauthenticated(provider):
    gate = SessionGate(provider, admin_email=ADMIN)
    assert gate.accept(None) is False
    assert not gate.is_authorized


def test_provider_failure_raises_auth_error(provider):
    gate = SessionGate(provider, admin_email=ADMIN)
    with pytest.raises(AuthError):
        gate.sign_in("nobody", "pw")
    assert not gate.is_authorized


def test_listeners_see_sign_in_and_sign_out(provider):
    gate = SessionGate(provider, admin_email=ADMIN)
    seen = []
    gate.subscribe(seen.append)

    gate.sign_in("admin", "pw")
    gate.sign_out()

    assert seen == [True, False]
    assert provider.signed_out == ["admin"]


def test_unsubscribe(provider):
    gate = SessionGate(provider, admin_email=ADMIN)
    seen = []
    unsubscribe = gate.subscribe(seen.append)
    unsubscribe()
    gate.sign_in("admin", "pw")
    assert seen == []


def test_require(provider):
    gate = SessionGate(provider, admin_email=ADMIN)
    with pytest.raises(AuthError):
        gate.require()
    gate.sign_in("admin", "pw")
    gate.require()
