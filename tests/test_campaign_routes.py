"""Tests for api/routes/campaigns.py - campaigns, invite admin and party roster."""

from conftest import create_campaign, create_character, create_invite


def test_campaign_crud(client, signup):
    gm = signup("gm@tavern.test")

    created = client.post(
        "/api/campaigns",
        json={"name": "  Salt Marsh ", "description": "Smugglers", "gm_name": "Ada"},
        headers=gm,
    )
    assert created.status_code == 201
    campaign = created.json()
    assert campaign["name"] == "Salt Marsh"
    assert campaign["gm_name"] == "Ada"

    listed = client.get("/api/campaigns", headers=gm).json()
    assert [c["id"] for c in listed] == [campaign["id"]]

    updated = client.patch(
        f"/api/campaigns/{campaign['id']}", json={"name": "Drowned Marsh"}, headers=gm
    )
    assert updated.status_code == 200
    assert updated.json()["name"] == "Drowned Marsh"

    assert client.delete(f"/api/campaigns/{campaign['id']}", headers=gm).status_code == 200
    assert client.get(f"/api/campaigns/{campaign['id']}", headers=gm).status_code == 404


def test_campaigns_require_authentication(client):
    assert client.get("/api/campaigns").status_code == 401
    assert client.post("/api/campaigns", json={"name": "x"}).status_code == 401


def test_foreign_campaign_is_not_found(client, signup):
    gm = signup("gm@tavern.test")
    stranger = signup("stranger@tavern.test")
    campaign_id = create_campaign(client, gm)

    assert client.get(f"/api/campaigns/{campaign_id}", headers=stranger).status_code == 404
    assert client.get("/api/campaigns/nope", headers=stranger).status_code == 404
    assert (
        client.patch(
            f"/api/campaigns/{campaign_id}", json={"name": "Mine"}, headers=stranger
        ).status_code
        == 404
    )
    assert client.delete(f"/api/campaigns/{campaign_id}", headers=stranger).status_code == 404
    assert client.get("/api/campaigns", headers=stranger).json() == []


def test_blank_campaign_name_rejected(client, signup):
    gm = signup("gm@tavern.test")
    campaign_id = create_campaign(client, gm)

    response = client.patch(f"/api/campaigns/{campaign_id}", json={"name": "  "}, headers=gm)
    assert response.status_code == 400


def test_create_and_list_invites(client, signup):
    gm = signup("gm@tavern.test")
    campaign_id = create_campaign(client, gm)

    invite = create_invite(client, gm, campaign_id, max_uses=4, expires_in_days=3)
    assert invite["campaign_id"] == campaign_id
    assert invite["max_uses"] == 4
    assert invite["used_count"] == 0
    assert invite["status"] == "active"
    assert invite["join_path"] == f"/join/{invite['token']}"
    assert len(invite["token"]) == 40

    listed = client.get(f"/api/campaigns/{campaign_id}/invites", headers=gm)
    assert listed.status_code == 200
    assert [i["id"] for i in listed.json()["invites"]] == [invite["id"]]


def test_invite_request_validation(client, signup):
    gm = signup("gm@tavern.test")
    campaign_id = create_campaign(client, gm)
    url = f"/api/campaigns/{campaign_id}/invites"

    assert client.post(url, json={"max_uses": 0}, headers=gm).status_code == 422
    both = {"expires_in_days": 2, "expires_at": "2099-01-01T00:00:00Z"}
    assert client.post(url, json=both, headers=gm).status_code == 422
    past = {"expires_at": "2001-01-01T00:00:00Z"}
    assert client.post(url, json=past, headers=gm).status_code == 400


def test_only_owner_manages_invites(client, signup):
    gm = signup("gm@tavern.test")
    stranger = signup("stranger@tavern.test")
    campaign_id = create_campaign(client, gm)
    invite = create_invite(client, gm, campaign_id)

    base = f"/api/campaigns/{campaign_id}/invites"
    assert client.post(base, json={}, headers=stranger).status_code == 404
    assert client.get(base, headers=stranger).status_code == 404
    assert (
        client.post(f"{base}/{invite['id']}/revoke", headers=stranger).status_code == 404
    )


def test_revoke_invite(client, signup):
    gm = signup("gm@tavern.test")
    player = signup("player@tavern.test")
    campaign_id = create_campaign(client, gm)
    invite = create_invite(client, gm, campaign_id)
    revoke_url = f"/api/campaigns/{campaign_id}/invites/{invite['id']}/revoke"

    revoked = client.post(revoke_url, headers=gm)
    assert revoked.status_code == 200
    assert revoked.json()["is_revoked"] is True
    assert revoked.json()["status"] == "revoked"

    # Second revoke is a no-op
    assert client.post(revoke_url, headers=gm).status_code == 200
    assert client.get(f"/join/{invite['token']}", headers=player).status_code == 404

    missing = client.post(f"/api/campaigns/{campaign_id}/invites/nope/revoke", headers=gm)
    assert missing.status_code == 404


def test_owner_adds_own_character_to_party(client, signup):
    gm = signup("gm@tavern.test")
    campaign_id = create_campaign(client, gm)
    character_id = create_character(client, gm, "Warden")
    url = f"/api/campaigns/{campaign_id}/party"

    first = client.post(url, json={"character_id": character_id}, headers=gm)
    assert first.status_code == 200
    assert first.json()["already_in_party"] is False
    assert first.json()["party_member"]["character"]["name"] == "Warden"

    again = client.post(url, json={"character_id": character_id}, headers=gm)
    assert again.json()["already_in_party"] is True
    assert again.json()["party_member"]["id"] == first.json()["party_member"]["id"]

    roster = client.get(url, headers=gm).json()
    assert [m["character_id"] for m in roster] == [character_id]


def test_add_party_member_checks_character_owner(client, signup):
    gm = signup("gm@tavern.test")
    player = signup("player@tavern.test")
    campaign_id = create_campaign(client, gm)
    character_id = create_character(client, player)
    url = f"/api/campaigns/{campaign_id}/party"

    assert client.post(url, json={"character_id": character_id}, headers=gm).status_code == 404
    assert client.post(url, json={"character_id": " "}, headers=gm).status_code == 400
    assert client.post(url, json={"character_id": character_id}, headers=player).status_code == 404


def test_leave_party_keeps_invite_count(client, signup):
    gm = signup("gm@tavern.test")
    player = signup("player@tavern.test")
    stranger = signup("stranger@tavern.test")
    campaign_id = create_campaign(client, gm)
    invite = create_invite(client, gm, campaign_id, max_uses=2)
    character_id = create_character(client, player)
    client.post(
        "/join",
        json={"token": invite["token"], "character_id": character_id},
        headers=player,
        follow_redirects=False,
    )
    seat_url = f"/api/campaigns/{campaign_id}/party/{character_id}"

    assert client.delete(seat_url, headers=stranger).status_code == 404
    assert client.delete(seat_url, headers=player).status_code == 200
    assert client.delete(seat_url, headers=player).status_code == 404

    invites = client.get(f"/api/campaigns/{campaign_id}/invites", headers=gm).json()
    assert invites["invites"][0]["used_count"] == 1
