"""Dashboard aggregates, error envelope and app wiring."""

from tests.conftest import auth_headers, create_idea


def test_statistics(client, seed_users):
    alice = auth_headers(client, "alice")
    create_idea(client, alice, category="Facilities")
    create_idea(client, alice, title="Green roof", category="Sustainability")
    create_idea(client, alice, title="Solar panels", category="Sustainability")

    stats = client.get("/api/dashboard/statistics", headers=alice).json()
    assert stats["total_ideas"] == 3
    assert stats["ideas_this_week"] == 3
    assert stats["concept_count"] == 3
    assert stats["in_progress_count"] == 0
    assert stats["total_users"] == 5
    assert stats["popular_category"] == "Sustainability"
    assert len(stats["weekly_activity"]) == 7
    assert stats["weekly_activity"][-1]["ideas"] == 3


def test_statistics_empty(client, seed_users):
    stats = client.get("/api/dashboard/statistics", headers=auth_headers(client, "alice")).json()
    assert stats["total_ideas"] == 0
    assert stats["popular_category"] == "N/A"


def test_top_and_new_ideas(client, seed_users):
    alice = auth_headers(client, "alice")
    first = create_idea(client, alice, title="First")
    second = create_idea(client, alice, title="Second")
    client.post(f"/api/ideas/{first['idea_id']}/like", headers=auth_headers(client, "bob"))

    top = client.get("/api/dashboard/top-ideas", headers=alice).json()
    assert [t["rank"] for t in top] == [1, 2]
    assert top[0]["idea"]["idea_id"] == first["idea_id"]
    assert top[0]["like_count"] == 1

    newest = client.get("/api/dashboard/new-ideas", headers=alice).json()
    assert [i["idea_id"] for i in newest] == [second["idea_id"], first["idea_id"]]


def test_error_envelope(client, seed_users):
    resp = client.get("/api/ideas/9999", headers=auth_headers(client, "alice"))
    assert resp.status_code == 404
    body = resp.json()
    assert set(body) == {"timestamp", "status", "error", "message"}
    assert body["status"] == 404
    assert body["error"] == "Not Found"
    assert body["message"] == "Idea not found"


def test_validation_error_is_bad_request(client):
    resp = client.post("/api/auth/login", json={})
    assert resp.status_code == 400
    assert resp.json()["status"] == 400


def test_missing_token_is_unauthorized(client):
    resp = client.get("/api/dashboard/statistics")
    assert resp.status_code == 401


def test_health_and_cors(client):
    assert client.get("/api/health").json()["status"] == "ok"
    resp = client.options(
        "/api/ideas",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
    )
    assert resp.status_code == 200
    assert "access-control-allow-origin" in resp.headers
    assert resp.headers["access-control-max-age"] == "86400"
