"""Tests for api/routes/gm_tools.py - campaign NPCs and quests."""

from conftest import create_campaign, create_session
from tavern.models.npc import NpcModel
from tavern.models.quest import QuestModel


def test_npc_crud(client, signup):
    gm = signup("gm@tavern.test")
    campaign_id = create_campaign(client, gm)
    path = f"/api/campaigns/{campaign_id}/npcs"

    created = client.post(
        path,
        json={"name": "Marta", "role": "bartender", "description": "Knows every rumour."},
        headers=gm,
    )
    assert created.status_code == 201
    npc_id = created.json()["id"]
    client.post(path, json={"name": "Abbot Crane"}, headers=gm)

    assert [n["name"] for n in client.get(path, headers=gm).json()] == [
        "Abbot Crane",
        "Marta",
    ]

    updated = client.patch(f"{path}/{npc_id}", json={"role": "villain"}, headers=gm)
    assert updated.json()["role"] == "villain"
    assert updated.json()["description"] == "Knows every rumour."

    blank = client.patch(f"{path}/{npc_id}", json={"name": "  "}, headers=gm)
    assert blank.status_code == 400

    assert client.delete(f"{path}/{npc_id}", headers=gm).status_code == 200
    assert client.delete(f"{path}/{npc_id}", headers=gm).status_code == 404
    assert [n["name"] for n in client.get(path, headers=gm).json()] == ["Abbot Crane"]


def test_quest_status_changes_are_logged(client, signup):
    gm = signup("gm@tavern.test")
    campaign_id = create_campaign(client, gm)
    session_id = create_session(client, gm, campaign_id)
    path = f"/api/campaigns/{campaign_id}/quests"

    quest = client.post(
        path,
        json={"title": "The Drowned Bell", "summary": "Silence the bell."},
        headers=gm,
    ).json()
    assert quest["status"] == "PLANNED"

    active = client.patch(
        f"{path}/{quest['id']}",
        json={"status": "active", "session_id": session_id},
        headers=gm,
    )
    assert active.status_code == 200
    assert active.json()["status"] == "ACTIVE"

    # Same status again is not a change
    client.patch(
        f"{path}/{quest['id']}",
        json={"status": "ACTIVE", "session_id": session_id},
        headers=gm,
    )
    # No session, no event
    client.patch(f"{path}/{quest['id']}", json={"status": "COMPLETED"}, headers=gm)

    events = client.get(f"/api/sessions/{session_id}/events", headers=gm).json()
    assert [e["text"] for e in events] == ["Quest update: The Drowned Bell -> ACTIVE"]

    listed = client.get(path, headers=gm).json()
    assert [(q["title"], q["status"]) for q in listed] == [("The Drowned Bell", "COMPLETED")]


def test_quest_rejects_unknown_status(client, signup):
    gm = signup("gm@tavern.test")
    campaign_id = create_campaign(client, gm)
    path = f"/api/campaigns/{campaign_id}/quests"

    bad = client.post(path, json={"title": "Side job", "status": "ABANDONED"}, headers=gm)
    assert bad.status_code == 400
    assert client.get(path, headers=gm).json() == []

    quest_id = client.post(path, json={"title": "Side job"}, headers=gm).json()["id"]
    assert (
        client.patch(f"{path}/{quest_id}", json={"status": "DONE"}, headers=gm).status_code
        == 400
    )
    wrong_session = client.patch(
        f"{path}/{quest_id}",
        json={"status": "FAILED", "session_id": "missing"},
        headers=gm,
    )
    assert wrong_session.status_code == 404
    assert client.get(path, headers=gm).json()[0]["status"] == "PLANNED"


def test_gm_tools_are_hidden_from_other_users(client, signup):
    gm = signup("gm@tavern.test")
    player = signup("player@tavern.test")
    campaign_id = create_campaign(client, gm)
    quest_id = client.post(
        f"/api/campaigns/{campaign_id}/quests", json={"title": "Secret"}, headers=gm
    ).json()["id"]

    assert client.get(f"/api/campaigns/{campaign_id}/npcs", headers=player).status_code == 404
    assert client.get(f"/api/campaigns/{campaign_id}/quests", headers=player).status_code == 404
    assert (
        client.delete(
            f"/api/campaigns/{campaign_id}/quests/{quest_id}", headers=player
        ).status_code
        == 404
    )
    other_campaign = create_campaign(client, gm, "Second Table")
    assert (
        client.delete(
            f"/api/campaigns/{other_campaign}/quests/{quest_id}", headers=gm
        ).status_code
        == 404
    )


def test_deleting_a_campaign_removes_its_gm_tools(client, signup, db):
    gm = signup("gm@tavern.test")
    campaign_id = create_campaign(client, gm)
    client.post(f"/api/campaigns/{campaign_id}/npcs", json={"name": "Marta"}, headers=gm)
    client.post(f"/api/campaigns/{campaign_id}/quests", json={"title": "Bell"}, headers=gm)

    assert client.delete(f"/api/campaigns/{campaign_id}", headers=gm).status_code == 200

    db.expire_all()
    assert db.query(NpcModel).count() == 0
    assert db.query(QuestModel).count() == 0
