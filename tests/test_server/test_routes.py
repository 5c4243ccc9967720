"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from homepoker.server import routes
from homepoker.server.app import create_app


@pytest.fixture
def client(monkeypatch):
    """Client against a fresh app with no table."""
    monkeypatch.setattr(routes, "_table", None)
    return TestClient(create_app())


def create(client, **overrides):
    body = {
        "name": "Friday",
        "players": [{"name": "Alice"}, {"name": "Bob"}, {"name": "Carol"}],
    }
    body.update(overrides)
    response = client.post("/table", json=body)
    assert response.status_code == 200
    return response.json()["table"]


def player_ids(table):
    return [p["id"] for p in table["players"]]


class TestTableRoutes:
    """Tests for creating and configuring the table."""

    def test_no_table(self, client):
        response = client.get("/table")
        assert response.status_code == 400
        assert response.json()["detail"] == "Table not created"

    def test_create(self, client):
        table = create(client)
        assert table["name"] == "Friday"
        assert table["variant"] == "texasHoldem"
        assert table["config"]["big_blind"] == 2
        assert [p["seat"] for p in table["players"]] == [1, 2, 3]
        assert table["can_undo"] is False

    def test_create_duplicate_seats(self, client):
        response = client.post("/table", json={
            "name": "Friday",
            "players": [{"name": "Alice", "seat": 1}, {"name": "Bob", "seat": 1}],
        })
        assert response.status_code == 400

    def test_unknown_variant(self, client):
        response = client.post("/table", json={"name": "Friday", "variant": "omaha"})
        assert response.status_code == 400

    def test_players(self, client):
        table = create(client)
        response = client.post("/players", json={"name": "Dave", "stack": 300})
        assert response.status_code == 200
        assert response.json()["table"]["players"][-1]["seat"] == 4

        alice = player_ids(table)[0]
        response = client.post(f"/players/{alice}/rebuy", json={"amount": 500})
        assert response.json()["table"]["players"][0]["stack"] == 1500

        response = client.delete(f"/players/{alice}")
        assert len(response.json()["table"]["players"]) == 3

    def test_config(self, client):
        create(client)
        response = client.post("/table/config", json={"small_blind": 5, "big_blind": 10})
        assert response.status_code == 200
        assert response.json()["table"]["config"]["big_blind"] == 10


class TestHoldemRoutes:
    """Tests for playing a Hold'em hand over HTTP."""

    def test_hand_flow(self, client):
        ids = player_ids(create(client))

        response = client.post("/hands", json={"dealer_seat": 1})
        assert response.status_code == 200
        hand = response.json()["table"]["current_hand"]
        assert hand["phase"] == "AWAITING_DEAL_CONFIRM"
        assert hand["active_player"] == "WAITING_FOR_DEAL_CONFIRM"

        hand = client.post("/hands/confirm_deal").json()["table"]["current_hand"]
        assert hand["active_player"] == ids[0]

        response = client.post("/hands/action", json={"action_type": "check"})
        assert response.status_code == 400

        response = client.post("/hands/action", json={"action_type": "fold"})
        assert response.json()["action_type"] == "fold"
        table = client.post("/hands/action", json={"action_type": "fold"}).json()["table"]

        assert table["current_hand"] is None
        assert len(table["hand_history"]) == 1
        assert table["hand_history"][0]["winners"][0]["player_id"] == ids[2]

    def test_second_hand_cannot_start_during_first(self, client):
        create(client)
        client.post("/hands", json={"dealer_seat": 1})
        response = client.post("/hands")
        assert response.status_code == 400

    def test_rebuy_during_hand(self, client):
        ids = player_ids(create(client))
        client.post("/hands", json={"dealer_seat": 1})
        response = client.post(f"/players/{ids[0]}/rebuy", json={"amount": 100})
        assert response.status_code == 400

    def test_community_cards(self, client):
        create(client)
        client.post("/hands", json={"dealer_seat": 1})
        client.post("/hands/confirm_deal")
        client.post("/hands/action", json={"action_type": "call"})
        client.post("/hands/action", json={"action_type": "call"})
        client.post("/hands/action", json={"action_type": "check"})

        response = client.post("/hands/community", json={"cards": ["As", "As", "Kd"]})
        assert response.status_code == 400

        response = client.post("/hands/community", json={"cards": ["As", "Qs", "Kd"]})
        hand = response.json()["table"]["current_hand"]
        assert hand["board"] == ["As", "Qs", "Kd"]
        assert hand["street"] == "flop"
        assert hand["pot_total"] == 6

    def test_undo_redo(self, client):
        create(client)
        assert client.post("/undo").status_code == 400

        client.post("/hands", json={"dealer_seat": 1})
        table = client.post("/undo").json()["table"]
        assert table["current_hand"] is None
        assert table["can_redo"] is True

        table = client.post("/redo").json()["table"]
        assert table["current_hand"]["hand_number"] == 1
        assert client.post("/redo").status_code == 400


class TestStudRoutes:
    """Tests for playing 5-Card Stud over HTTP."""

    def test_up_cards_and_first_actor(self, client):
        ids = player_ids(create(
            client,
            variant="fiveCardStud",
            small_blind=None,
            big_blind=None,
            ante=1,
            players=[{"name": "Alice"}, {"name": "Bob"}],
        ))
        client.post("/hands", json={"dealer_seat": 1})
        client.post("/hands/confirm_deal")
        client.post("/hands/action", json={"action_type": "check"})
        hand = client.post("/hands/action", json={"action_type": "check"}).json()["table"]["current_hand"]
        assert hand["active_player"] == "WAITING_FOR_STUD_CARD"

        client.post("/hands/stud_card", json={"card": "2c"})
        hand = client.post("/hands/stud_card", json={"card": "Ah"}).json()["table"]["current_hand"]

        assert hand["street"] == "street2"
        assert hand["active_player"] == ids[0]
        up_cards = {
            ph["player_id"]: [c["code"] for c in ph["cards"] if c["face_up"]]
            for ph in hand["player_hands"]
        }
        assert up_cards == {ids[0]: ["Ah"], ids[1]: ["2c"]}

    def test_stud_first_only_from_its_phase(self, client):
        create(client, variant="fiveCardStud", ante=1)
        client.post("/hands", json={"dealer_seat": 1})
        assert client.post("/hands/stud_first").status_code == 400
