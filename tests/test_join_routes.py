"""Tests for api/routes/join.py - the join link, join form and player view."""

from datetime import datetime, timedelta

import pytz

from conftest import create_campaign, create_character, create_invite, create_session
from tavern.models.campaign_invite import CampaignInviteModel
from tavern.models.party_member import PartyMemberModel


def _join(client, headers, token, character_id):
    return client.post(
        "/join",
        json={"token": token, "character_id": character_id},
        headers=headers,
        follow_redirects=False,
    )


def _seats(db, campaign_id):
    db.expire_all()
    return (
        db.query(PartyMemberModel)
        .filter(PartyMemberModel.campaign_id == campaign_id)
        .all()
    )


def _used_count(db, token):
    db.expire_all()
    return (
        db.query(CampaignInviteModel)
        .filter(CampaignInviteModel.token == token)
        .one()
        .used_count
    )


def test_preview_unknown_token_is_not_found(client, signup):
    headers = signup("player@tavern.test")
    response = client.get("/join/not-a-token", headers=headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "This invitation is no longer valid."


def test_preview_redirects_anonymous_visitor_to_login(client, signup):
    gm = signup("gm@tavern.test")
    campaign_id = create_campaign(client, gm)
    token = create_invite(client, gm, campaign_id)["token"]

    response = client.get(f"/join/{token}", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == f"/login?callbackUrl=/join/{token}"


def test_preview_lists_only_joinable_characters(client, signup):
    gm = signup("gm@tavern.test")
    player = signup("player@tavern.test")
    campaign_id = create_campaign(client, gm, "Salt Marsh")
    token = create_invite(client, gm, campaign_id)["token"]

    seated = create_character(client, player, "Brindle")
    free = create_character(client, player, "Osk")
    archived = create_character(client, player, "Old Tam")
    client.post(
        f"/api/characters/{archived}/archive",
        json={"confirmation": "ARCHIVE"},
        headers=player,
    )
    create_character(client, gm, "Warden")
    assert _join(client, player, token, seated).status_code == 303

    response = client.get(f"/join/{token}", headers=player)

    assert response.status_code == 200
    body = response.json()
    assert body["token"] == token
    assert body["campaign"]["id"] == campaign_id
    assert body["campaign"]["name"] == "Salt Marsh"
    assert [c["id"] for c in body["characters"]] == [free]


def test_join_redirects_anonymous_to_login(client, signup):
    gm = signup("gm@tavern.test")
    campaign_id = create_campaign(client, gm)
    token = create_invite(client, gm, campaign_id)["token"]

    response = _join(client, {}, token, "anything")

    assert response.status_code == 303
    assert response.headers["location"] == f"/login?callbackUrl=/join/{token}"


def test_join_without_character_points_back_with_error(client, signup):
    gm = signup("gm@tavern.test")
    campaign_id = create_campaign(client, gm)
    token = create_invite(client, gm, campaign_id)["token"]

    response = _join(client, gm, token, "")

    assert response.status_code == 303
    assert response.headers["location"] == f"/join/{token}?error=character"


def test_join_without_token_goes_home(client, signup):
    player = signup("player@tavern.test")
    response = _join(client, player, "", "abc")

    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_join_with_invalid_token(client, signup):
    player = signup("player@tavern.test")
    character_id = create_character(client, player)

    response = _join(client, player, "not-a-token", character_id)

    assert response.status_code == 303
    assert response.headers["location"] == "/join/not-a-token?error=invalid"


def test_join_with_foreign_character_looks_like_missing_character(client, signup, db):
    gm = signup("gm@tavern.test")
    player = signup("player@tavern.test")
    stranger = signup("stranger@tavern.test")
    campaign_id = create_campaign(client, gm)
    token = create_invite(client, gm, campaign_id, max_uses=3)["token"]
    character_id = create_character(client, player)

    foreign = _join(client, stranger, token, character_id)
    missing = _join(client, stranger, token, "no-such-character")

    assert foreign.status_code == missing.status_code == 303
    assert foreign.headers["location"] == missing.headers["location"]
    assert foreign.headers["location"] == f"/join/{token}?error=character"
    assert _seats(db, campaign_id) == []
    assert _used_count(db, token) == 0


def test_expired_invite_rejects_join(client, signup, db):
    gm = signup("gm@tavern.test")
    player = signup("player@tavern.test")
    campaign_id = create_campaign(client, gm)
    token = create_invite(client, gm, campaign_id, max_uses=5, expires_in_days=1)["token"]
    character_id = create_character(client, player)

    db.query(CampaignInviteModel).filter(CampaignInviteModel.token == token).update(
        {CampaignInviteModel.expires_at: datetime.now(pytz.utc) - timedelta(hours=1)},
        synchronize_session=False,
    )
    db.commit()

    response = _join(client, player, token, character_id)
    assert response.headers["location"] == f"/join/{token}?error=invalid"
    assert client.get(f"/join/{token}", headers=player).status_code == 404


def test_invite_with_n_uses_admits_n_characters(client, signup, db):
    gm = signup("gm@tavern.test")
    player = signup("player@tavern.test")
    campaign_id = create_campaign(client, gm)
    token = create_invite(client, gm, campaign_id, max_uses=2)["token"]
    characters = [create_character(client, player, name) for name in ("A", "B", "C")]

    results = [_join(client, player, token, c).headers["location"] for c in characters]

    assert results[0] == f"/play/{campaign_id}/{characters[0]}"
    assert results[1] == f"/play/{campaign_id}/{characters[1]}"
    assert results[2] == f"/join/{token}?error=invalid"
    assert len(_seats(db, campaign_id)) == 2
    assert _used_count(db, token) == 2


def test_single_use_invite_scenario(client, signup, db):
    """One seat: the first POST seats the character, the resubmit is a no-op."""
    gm = signup("gm@tavern.test")
    player = signup("player@tavern.test")
    campaign_id = create_campaign(client, gm)
    token = create_invite(client, gm, campaign_id, max_uses=1)["token"]
    character_id = create_character(client, player, "Brindle")
    play = f"/play/{campaign_id}/{character_id}"

    first = _join(client, player, token, character_id)
    assert first.status_code == 303
    assert first.headers["location"] == play
    seats = _seats(db, campaign_id)
    assert [(s.campaign_id, s.character_id) for s in seats] == [(campaign_id, character_id)]
    assert _used_count(db, token) == 1

    second = _join(client, player, token, character_id)
    assert second.status_code == 303
    assert second.headers["location"] == play
    assert len(_seats(db, campaign_id)) == 1
    assert _used_count(db, token) == 1


def test_player_view(client, signup):
    gm = signup("gm@tavern.test")
    player = signup("player@tavern.test")
    stranger = signup("stranger@tavern.test")
    campaign_id = create_campaign(client, gm, "Salt Marsh")
    token = create_invite(client, gm, campaign_id)["token"]
    character_id = create_character(client, player, "Brindle")
    _join(client, player, token, character_id)

    response = client.get(f"/play/{campaign_id}/{character_id}", headers=player)
    assert response.status_code == 200
    body = response.json()
    assert body["campaign"]["name"] == "Salt Marsh"
    assert body["character"]["id"] == character_id
    assert [m["character"]["name"] for m in body["party"]] == ["Brindle"]
    assert body["ongoing_downtime"] == []
    assert body["your_events"] == []
    assert body["recent_sessions"] == []

    assert client.get(f"/play/{campaign_id}/{character_id}", headers=gm).status_code == 200
    assert (
        client.get(f"/play/{campaign_id}/{character_id}", headers=stranger).status_code
        == 404
    )
    assert client.get(f"/play/{campaign_id}/{character_id}").status_code == 401


def test_player_view_shows_downtime_events_and_recent_sessions(client, signup):
    gm = signup("gm@tavern.test")
    player = signup("player@tavern.test")
    campaign_id = create_campaign(client, gm)
    token = create_invite(client, gm, campaign_id)["token"]
    brindle = create_character(client, player, "Brindle")
    osk = create_character(client, player, "Osk")
    _join(client, player, token, brindle)
    _join(client, player, token, osk)

    session_ids = [
        create_session(client, gm, campaign_id, f"Session {n}") for n in range(1, 8)
    ]
    latest = session_ids[-1]

    def record(body):
        response = client.post(f"/api/sessions/{latest}/events", json=body, headers=gm)
        assert response.status_code == 201, response.text

    record(
        {
            "type": "hp_change",
            "character_id": brindle,
            "data": {"delta": -4, "current": 6},
        }
    )
    record({"type": "note", "data": {"text": "The bell tolls at midnight."}})
    record({"type": "loot", "character_id": osk, "data": {"item": "Silver key"}})

    downtime_path = f"/api/campaigns/{campaign_id}/downtime"
    crafting = client.post(
        downtime_path,
        json={"character_id": brindle, "title": "Craft a lantern"},
        headers=gm,
    ).json()
    training = client.post(
        downtime_path,
        json={"character_id": brindle, "title": "Train with the watch"},
        headers=gm,
    ).json()
    research = client.post(
        downtime_path,
        json={"character_id": brindle, "title": "Study the tide charts"},
        headers=gm,
    ).json()
    client.post(f"{downtime_path}/{training['id']}/complete", headers=gm)
    client.post(f"{downtime_path}/{research['id']}/cancel", headers=gm)
    client.post(
        downtime_path, json={"character_id": osk, "title": "Fish the marsh"}, headers=gm
    )

    body = client.get(f"/play/{campaign_id}/{brindle}", headers=player).json()

    assert [d["id"] for d in body["ongoing_downtime"]] == [crafting["id"]]
    assert [d["id"] for d in body["completed_downtime"]] == [training["id"]]
    assert [e["text"] for e in body["your_events"]] == ["HP -4 (now 6)"]
    assert sorted(e["text"] for e in body["campaign_events"]) == [
        "Loot: Silver key",
        "The bell tolls at midnight.",
    ]
    assert len(body["recent_sessions"]) == 5
    assert body["recent_sessions"][0]["id"] == latest
    assert set(s["id"] for s in body["recent_sessions"]) == set(session_ids[2:])
