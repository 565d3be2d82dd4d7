from unittest import mock

from django.contrib.auth.models import AnonymousUser

from role_user_manager.auth import create_nonce, verify_nonce
from role_user_manager.utils.choices import NonceActions


def test_valid_token(frontline_staff):
    token = create_nonce(frontline_staff, NonceActions.DASHBOARD)

    assert verify_nonce(token, frontline_staff, NonceActions.DASHBOARD)


def test_token_is_bound_to_its_scope(frontline_staff):
    token = create_nonce(frontline_staff, NonceActions.DASHBOARD)

    assert not verify_nonce(token, frontline_staff, NonceActions.ROLE_MANAGER)


def test_token_is_bound_to_its_user(frontline_staff, administrator):
    token = create_nonce(frontline_staff, NonceActions.DASHBOARD)

    assert not verify_nonce(token, administrator, NonceActions.DASHBOARD)


def test_expired_token(frontline_staff):
    with mock.patch("role_user_manager.auth.nonce.NONCE_LIFETIME", -10):
        token = create_nonce(frontline_staff, NonceActions.DASHBOARD)

    assert not verify_nonce(token, frontline_staff, NonceActions.DASHBOARD)


def test_tampered_token(frontline_staff):
    token = create_nonce(frontline_staff, NonceActions.DASHBOARD)
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])

    assert not verify_nonce(tampered, frontline_staff, NonceActions.DASHBOARD)


def test_missing_token_or_user(frontline_staff):
    token = create_nonce(frontline_staff, NonceActions.DASHBOARD)

    assert not verify_nonce("", frontline_staff, NonceActions.DASHBOARD)
    assert not verify_nonce(token, None, NonceActions.DASHBOARD)
    assert not verify_nonce(token, AnonymousUser(), NonceActions.DASHBOARD)
