"""Tests for utils/invite_manager.py - token generation, validation and admin."""

import re
from datetime import datetime, timedelta

import pytest
import pytz

from tavern.core.exceptions import InviteNotFoundError, ValidationError
from tavern.utils.invite_manager import (
    STATUS_ACTIVE,
    STATUS_EXHAUSTED,
    STATUS_EXPIRED,
    STATUS_REVOKED,
    InviteManager,
    as_utc,
    generate_invite_token,
    invite_status,
    validate_invite_token,
)


@pytest.fixture
def gm(make_user):
    return make_user("gm@tavern.test")


@pytest.fixture
def campaign(gm, make_campaign):
    return make_campaign(gm)


@pytest.fixture
def invites(db):
    return InviteManager(db)


def test_generated_tokens_are_url_safe_and_unique():
    tokens = {generate_invite_token() for _ in range(200)}
    assert len(tokens) == 200
    for token in tokens:
        assert len(token) == 40
        assert re.fullmatch(r"[A-Za-z0-9_-]+", token)


@pytest.mark.parametrize("length", [12, 43, 60, 128])
def test_generated_tokens_honour_requested_length(length):
    token = generate_invite_token(length)
    assert len(token) == length
    assert re.fullmatch(r"[A-Za-z0-9_-]+", token)


def test_as_utc_localizes_naive_values():
    naive = datetime(2030, 1, 1, 12, 0)
    assert as_utc(naive).tzinfo is not None
    assert as_utc(naive).hour == 12
    assert as_utc(None) is None


def test_create_invite_defaults(invites, campaign, gm):
    invite = invites.create_invite(campaign, gm)

    assert invite.campaign_id == campaign.id
    assert invite.used_count == 0
    assert invite.is_revoked is False
    assert invite.max_uses is None
    assert invite.expires_at is None
    assert invite.created_by_id == gm.user_id


def test_create_invite_relative_expiry(invites, campaign, gm):
    before = datetime.now(pytz.utc)
    invite = invites.create_invite(campaign, gm, expires_in_days=7, max_uses=3)

    expires_at = as_utc(invite.expires_at)
    assert before + timedelta(days=7) <= expires_at
    assert expires_at <= datetime.now(pytz.utc) + timedelta(days=7)
    assert invite.max_uses == 3


def test_create_invite_rejects_past_expiry(invites, campaign, gm):
    with pytest.raises(ValidationError):
        invites.create_invite(
            campaign, gm, expires_at=datetime.now(pytz.utc) - timedelta(minutes=1)
        )


def test_create_invite_rejects_zero_uses(invites, campaign, gm):
    with pytest.raises(ValidationError):
        invites.create_invite(campaign, gm, max_uses=0)


def test_validate_active_invite_returns_campaign(db, invites, campaign, gm):
    invite = invites.create_invite(campaign, gm, max_uses=2)

    found = validate_invite_token(db, invite.token)
    assert found is not None
    assert found.id == invite.id
    assert found.campaign.id == campaign.id


def test_validate_does_not_consume(db, invites, campaign, gm):
    invite = invites.create_invite(campaign, gm, max_uses=1)

    for _ in range(5):
        assert validate_invite_token(db, invite.token) is not None
    db.refresh(invite)
    assert invite.used_count == 0


@pytest.mark.parametrize("token", ["", None, "no-such-token"])
def test_validate_unknown_or_empty_token(db, token):
    assert validate_invite_token(db, token) is None


def test_validate_is_case_sensitive(db, invites, campaign, gm):
    invite = invites.create_invite(campaign, gm)
    swapped = invite.token.swapcase()
    if swapped != invite.token:
        assert validate_invite_token(db, swapped) is None


def test_validate_rejects_revoked(db, invites, campaign, gm):
    invite = invites.create_invite(campaign, gm)
    invites.revoke_invite(campaign.id, invite.id)

    assert validate_invite_token(db, invite.token) is None


def test_validate_rejects_expired(db, invites, campaign, gm):
    invite = invites.create_invite(campaign, gm, expires_in_days=1)
    invite.expires_at = datetime.now(pytz.utc) - timedelta(seconds=1)
    db.commit()

    assert validate_invite_token(db, invite.token) is None


def test_validate_expiry_boundary_is_exclusive(db, invites, campaign, gm):
    """An invite expiring exactly now is no longer valid."""
    invite = invites.create_invite(campaign, gm, expires_in_days=1)
    expires_at = as_utc(invite.expires_at)

    assert validate_invite_token(db, invite.token, now=expires_at) is None
    assert (
        validate_invite_token(db, invite.token, now=expires_at - timedelta(seconds=1))
        is not None
    )


def test_validate_rejects_exhausted(db, invites, campaign, gm):
    invite = invites.create_invite(campaign, gm, max_uses=2)
    invite.used_count = 2
    db.commit()

    assert validate_invite_token(db, invite.token) is None


def test_status_precedence(invites, campaign, gm, db):
    invite = invites.create_invite(campaign, gm, max_uses=1, expires_in_days=1)
    assert invite_status(invite) == STATUS_ACTIVE

    invite.used_count = 1
    assert invite_status(invite) == STATUS_EXHAUSTED

    invite.expires_at = datetime.now(pytz.utc) - timedelta(days=1)
    assert invite_status(invite) == STATUS_EXPIRED

    invite.is_revoked = True
    assert invite_status(invite) == STATUS_REVOKED


def test_list_invites_newest_first(invites, campaign, gm):
    first = invites.create_invite(campaign, gm)
    second = invites.create_invite(campaign, gm)

    listed = invites.list_invites(campaign.id)
    assert [i.id for i in listed] == [second.id, first.id]


def test_revoke_is_idempotent(invites, campaign, gm):
    invite = invites.create_invite(campaign, gm)

    assert invites.revoke_invite(campaign.id, invite.id).is_revoked is True
    assert invites.revoke_invite(campaign.id, invite.id).is_revoked is True


def test_revoke_checks_campaign(invites, campaign, gm, make_campaign):
    invite = invites.create_invite(campaign, gm)
    other = make_campaign(gm, name="Another Table")

    with pytest.raises(InviteNotFoundError):
        invites.revoke_invite(other.id, invite.id)
