"""Surveys: creation rules, voting and lifecycle."""

from datetime import datetime, timedelta

from tests.conftest import auth_headers


def _create(client, headers, **overrides):
    payload = {"question": "Where should the offsite be?", "options": ["Beach", "Mountains", "City"]}
    payload.update(overrides)
    resp = client.post("/api/surveys", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_survey_needs_two_options(client, seed_users):
    alice = auth_headers(client, "alice")
    resp = client.post("/api/surveys", json={"question": "Yes?", "options": ["Yes", "  "]}, headers=alice)
    assert resp.status_code == 400


def test_create_survey_keeps_option_order(client, seed_users):
    survey = _create(client, auth_headers(client, "alice"))
    assert [o["option_text"] for o in survey["options"]] == ["Beach", "Mountains", "City"]
    assert survey["is_active"] is True
    assert survey["total_votes"] == 0
    assert survey["has_voted"] is False


def test_single_vote_survey_rejects_second_vote(client, seed_users):
    survey = _create(client, auth_headers(client, "alice"))
    bob = auth_headers(client, "bob")
    first, second = survey["options"][0]["option_id"], survey["options"][1]["option_id"]

    resp = client.post(f"/api/surveys/{survey['survey_id']}/vote", json={"option_ids": [first]}, headers=bob)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_votes"] == 1
    assert data["has_voted"] is True
    assert data["user_voted_option_ids"] == [first]
    assert data["options"][0]["vote_count"] == 1
    assert data["options"][0]["percentage"] == 100.0

    for option_id in (first, second):
        again = client.post(f"/api/surveys/{survey['survey_id']}/vote", json={"option_ids": [option_id]}, headers=bob)
        assert again.status_code == 409


def test_vote_with_foreign_option_is_bad_request(client, seed_users):
    alice = auth_headers(client, "alice")
    survey = _create(client, alice)
    other = _create(client, alice, question="Lunch?", options=["Pizza", "Sushi"])
    resp = client.post(
        f"/api/surveys/{survey['survey_id']}/vote",
        json={"option_ids": [other["options"][0]["option_id"]]},
        headers=auth_headers(client, "bob"),
    )
    assert resp.status_code == 400


def test_empty_vote_is_bad_request(client, seed_users):
    survey = _create(client, auth_headers(client, "alice"))
    resp = client.post(f"/api/surveys/{survey['survey_id']}/vote", json={"option_ids": []}, headers=auth_headers(client, "bob"))
    assert resp.status_code == 400


def test_multiple_vote_survey_skips_already_voted_options(client, seed_users):
    survey = _create(client, auth_headers(client, "alice"), allow_multiple_votes=True)
    bob = auth_headers(client, "bob")
    a, b = survey["options"][0]["option_id"], survey["options"][1]["option_id"]

    client.post(f"/api/surveys/{survey['survey_id']}/vote", json={"option_ids": [a]}, headers=bob)
    resp = client.post(f"/api/surveys/{survey['survey_id']}/vote", json={"option_ids": [a, b]}, headers=bob)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_votes"] == 2
    assert sorted(data["user_voted_option_ids"]) == sorted([a, b])
    assert [o["vote_count"] for o in data["options"]] == [1, 1, 0]


def test_closed_and_expired_surveys_reject_votes(client, seed_users):
    alice = auth_headers(client, "alice")
    bob = auth_headers(client, "bob")
    survey = _create(client, alice)

    assert client.put(f"/api/surveys/{survey['survey_id']}/close", headers=bob).status_code == 403
    closed = client.put(f"/api/surveys/{survey['survey_id']}/close", headers=alice)
    assert closed.status_code == 200
    assert closed.json()["is_active"] is False

    resp = client.post(
        f"/api/surveys/{survey['survey_id']}/vote",
        json={"option_ids": [survey["options"][0]["option_id"]]},
        headers=bob,
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Survey is closed"

    expired = _create(client, alice, expires_at=(datetime.now() - timedelta(hours=1)).isoformat())
    resp = client.post(
        f"/api/surveys/{expired['survey_id']}/vote",
        json={"option_ids": [expired["options"][0]["option_id"]]},
        headers=bob,
    )
    assert resp.status_code == 400


def test_active_surveys_and_listing(client, seed_users):
    alice = auth_headers(client, "alice")
    open_survey = _create(client, alice, question="Open one")
    closed = _create(client, alice, question="Closed one")
    client.put(f"/api/surveys/{closed['survey_id']}/close", headers=alice)

    active = client.get("/api/surveys/active", headers=alice).json()
    assert [s["survey_id"] for s in active] == [open_survey["survey_id"]]

    page = client.get("/api/surveys", headers=alice).json()
    assert page["total_elements"] == 2


def test_delete_survey_creator_or_admin(client, seed_users):
    alice = auth_headers(client, "alice")
    first = _create(client, alice)
    second = _create(client, alice, question="Another")

    assert client.delete(f"/api/surveys/{first['survey_id']}", headers=auth_headers(client, "bob")).status_code == 403
    assert client.delete(f"/api/surveys/{first['survey_id']}", headers=alice).status_code == 204
    assert client.delete(f"/api/surveys/{second['survey_id']}", headers=auth_headers(client, "admin")).status_code == 204
    assert client.get(f"/api/surveys/{first['survey_id']}", headers=alice).status_code == 404
