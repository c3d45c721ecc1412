"""Tests for api/routes/characters.py - characters and their game state."""

from conftest import create_campaign, create_character


def test_create_character_defaults(client, signup):
    player = signup("player@tavern.test")

    response = client.post(
        "/api/characters",
        json={"name": "Brindle", "class_name": "Ranger", "hp_max": 14},
        headers=player,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Brindle"
    assert body["hp_current"] == 14
    assert body["hp_max"] == 14
    assert body["xp"] == 0
    assert body["conditions"] == []
    assert body["is_archived"] is False
    assert body["owner_email"] == "player@tavern.test"


def test_characters_are_private(client, signup):
    player = signup("player@tavern.test")
    stranger = signup("stranger@tavern.test")
    character_id = create_character(client, player)

    assert client.get(f"/api/characters/{character_id}", headers=stranger).status_code == 404
    assert client.get("/api/characters", headers=stranger).json() == []
    patch = client.patch(
        f"/api/characters/{character_id}", json={"name": "Mine"}, headers=stranger
    )
    assert patch.status_code == 404


def test_state_update_clamps_hp_and_xp(client, signup):
    player = signup("player@tavern.test")
    character_id = create_character(client, player)
    url = f"/api/characters/{character_id}/state"

    body = client.patch(url, json={"hp_current": 99}, headers=player).json()
    assert body["hp_current"] == body["hp_max"] == 10

    body = client.patch(url, json={"hp_current": -4}, headers=player).json()
    assert body["hp_current"] == 0

    body = client.patch(url, json={"hp_max": 20, "hp_current": 15}, headers=player).json()
    assert (body["hp_current"], body["hp_max"]) == (15, 20)

    body = client.patch(url, json={"hp_max": 8}, headers=player).json()
    assert (body["hp_current"], body["hp_max"]) == (8, 8)

    body = client.patch(url, json={"xp": 100, "award_xp": 50}, headers=player).json()
    assert body["xp"] == 150


def test_state_update_normalizes_conditions(client, signup):
    player = signup("player@tavern.test")
    character_id = create_character(client, player)

    body = client.patch(
        f"/api/characters/{character_id}/state",
        json={"conditions": ["Poisoned", " poisoned", "", "Prone"]},
        headers=player,
    ).json()

    assert body["conditions"] == ["poisoned", "prone"]


def test_archive_requires_confirmation(client, signup):
    player = signup("player@tavern.test")
    character_id = create_character(client, player)
    url = f"/api/characters/{character_id}/archive"

    assert client.post(url, json={"confirmation": "archive"}, headers=player).status_code == 400

    archived = client.post(url, json={"confirmation": "ARCHIVE"}, headers=player)
    assert archived.status_code == 200
    assert archived.json()["is_archived"] is True

    assert client.get("/api/characters", headers=player).json() == []
    listed = client.get("/api/characters?include_archived=true", headers=player).json()
    assert [c["id"] for c in listed] == [character_id]


def test_editing_restores_archived_character(client, signup):
    player = signup("player@tavern.test")
    character_id = create_character(client, player)
    client.post(
        f"/api/characters/{character_id}/archive",
        json={"confirmation": "ARCHIVE"},
        headers=player,
    )

    body = client.patch(
        f"/api/characters/{character_id}", json={"level": 3}, headers=player
    ).json()

    assert body["level"] == 3
    assert body["is_archived"] is False


def test_delete_requires_name_and_free_seat(client, signup):
    player = signup("player@tavern.test")
    character_id = create_character(client, player, "Brindle")
    campaign_id = create_campaign(client, player)
    client.post(
        f"/api/campaigns/{campaign_id}/party",
        json={"character_id": character_id},
        headers=player,
    )
    url = f"/api/characters/{character_id}/delete"

    assert client.post(url, json={"confirmation": "brindle"}, headers=player).status_code == 400
    assert client.post(url, json={"confirmation": "Brindle"}, headers=player).status_code == 409

    client.delete(f"/api/campaigns/{campaign_id}/party/{character_id}", headers=player)
    assert client.post(url, json={"confirmation": "Brindle"}, headers=player).status_code == 200
    assert client.get(f"/api/characters/{character_id}", headers=player).status_code == 404
