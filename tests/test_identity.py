"""Tests for the identity provider."""

from __future__ import annotations

import pytest

from quiz_rooms.core.errors import LoginRequiredError
from quiz_rooms.core.identity import IdentityProvider


def test_sign_in_issues_distinct_stable_ids():
    provider = IdentityProvider()
    first = provider.sign_in("  Alice ")
    second = provider.sign_in()
    assert first.uid != second.uid
    assert first.display_name == "Alice"
    assert second.display_name is None
    assert provider.require(first.uid) is first


@pytest.mark.parametrize("uid", [None, "", "   "])
def test_missing_uid_requires_login(uid):
    with pytest.raises(LoginRequiredError, match="login is required"):
        IdentityProvider().require(uid)


def test_unknown_uid_requires_login():
    provider = IdentityProvider()
    with pytest.raises(LoginRequiredError):
        provider.require("forged-uid")


def test_signed_out_uid_no_longer_resolves():
    provider = IdentityProvider()
    identity = provider.sign_in("Alice")
    provider.sign_out(identity.uid)
    with pytest.raises(LoginRequiredError):
        provider.require(identity.uid)


def test_sign_in_time_is_timezone_aware():
    identity = IdentityProvider().sign_in()
    assert identity.signed_in_at.tzinfo is not None
