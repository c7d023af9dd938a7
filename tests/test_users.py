"""Tests for registration, approval, suspension and wallet binding."""

import pytest

from justicechain.db.models import ActivityAction, Role
from justicechain.errors import AuthorizationError, ConfigurationError, NotFoundError, ValidationError
from justicechain.workflow import UserService, WorkflowContext

from conftest import WALLETS


def test_register_issues_role_id(services):
    user = services.users.register("officer", "POLICE", WALLETS["police"], email="o@example.org")
    assert user.role == Role.POLICE
    assert user.role_id.startswith("POLI_")
    assert user.is_verified is False
    assert user.wallet_address == WALLETS["police"]


def test_register_rejects_duplicates_and_bad_input(services):
    services.users.register("officer", Role.POLICE, WALLETS["police"])
    with pytest.raises(ValidationError):
        services.users.register("officer", Role.JUDGE, WALLETS["judge"])
    with pytest.raises(ValidationError):
        services.users.register("boss", Role.ADMIN, WALLETS["admin"])
    with pytest.raises(ValidationError):
        services.users.register("someone", Role.POLICE, "0x123")
    with pytest.raises(ValidationError):
        services.users.register("someone", "SHERIFF", WALLETS["police"])
    with pytest.raises(ValidationError):
        services.users.register("  ", Role.POLICE, WALLETS["police"])


def test_approve_user_registers_role_on_ledger(services, police, admin, ledger):
    approved = services.users.approve_user(admin, police.user_id)
    assert approved.is_verified is True
    assert approved.role_tx_hash.startswith("0x")
    assert ("register_role", "POLICE", WALLETS["police"]) in ledger.calls
    assert services.users.check_verification(WALLETS["police"], "POLICE") is True
    assert services.users.check_verification(WALLETS["judge"], "JUDGE") is False


def test_approve_user_survives_ledger_failure(services, police, admin, ledger):
    ledger.failing.add("register_role")
    approved = services.users.approve_user(admin, police.user_id)
    assert approved.is_verified is True
    assert approved.role_tx_hash is None


def test_approve_user_requires_admin(services, police, judge):
    with pytest.raises(AuthorizationError):
        services.users.approve_user(judge, police.user_id)


def test_approve_unknown_user(services, admin):
    with pytest.raises(NotFoundError):
        services.users.approve_user(admin, 4242)


def test_check_verification_needs_ledger(db):
    users = UserService(WorkflowContext.build(db))
    with pytest.raises(ConfigurationError):
        users.check_verification(WALLETS["police"], "POLICE")


def test_toggle_suspension(services, police, admin):
    suspended = services.users.toggle_suspension(admin, police.user_id)
    assert suspended.is_suspended is True
    with pytest.raises(AuthorizationError):
        services.users.update_wallet(police, WALLETS["judge"])

    reinstated = services.users.toggle_suspension(admin, police.user_id)
    assert reinstated.is_suspended is False

    with pytest.raises(ValidationError):
        services.users.toggle_suspension(admin, admin.user_id)


def test_update_wallet_logs_change(services, police, admin):
    new_wallet = "0x6666666666666666666666666666666666666666"
    user = services.users.update_wallet(police, new_wallet)
    assert user.wallet_address == new_wallet
    assert user.last_login_at is not None

    feed = services.audit.user_feed(police, police.user_id)
    assert feed[0].action == ActivityAction.WALLET_UPDATED
    assert feed[0].attributes["previous"] == WALLETS["police"]

    with pytest.raises(ValidationError):
        services.users.update_wallet(police, "not-a-wallet")


def test_user_reads_are_scoped(services, police, judge, admin):
    assert services.users.me(police).username == "officer"
    assert services.users.get_user(admin, police.user_id).id == police.user_id
    with pytest.raises(AuthorizationError):
        services.users.get_user(judge, police.user_id)
    with pytest.raises(AuthorizationError):
        services.users.list_users(police)

    judges = services.users.list_users(admin, "JUDGE")
    assert [u.username for u in judges] == ["judge"]


def test_user_feed_is_scoped(services, police, judge):
    with pytest.raises(AuthorizationError):
        services.audit.user_feed(judge, police.user_id)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
