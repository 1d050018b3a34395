"""Idea lifecycle: create, read, update, delete, listing and lookups."""

from ideaboard.models.audit_log import AuditLog
from ideaboard.models.group import IdeaGroup, GroupMember
from tests.conftest import auth_headers, create_idea


def test_create_then_fetch_round_trip(client, seed_users):
    headers = auth_headers(client, "alice")
    created = create_idea(
        client,
        headers,
        title="Bike repair corner",
        description="Tools and a stand in the garage",
        category="Wellbeing",
        tags=["bikes", "garage"],
    )
    assert created["status"] == "CONCEPT"
    assert created["progress_percentage"] == 0
    assert created["like_count"] == 0

    resp = client.get(f"/api/ideas/{created['idea_id']}", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["title"] == "Bike repair corner"
    assert data["description"] == "Tools and a stand in the garage"
    assert data["category"] == "Wellbeing"
    assert data["tags"] == ["bikes", "garage"]
    assert data["author"]["username"] == "alice"
    assert data["group_id"] is not None


def test_create_idea_sets_up_group_xp_and_audit(client, db, seed_users):
    headers = auth_headers(client, "alice")
    idea = create_idea(client, headers)

    group = db.query(IdeaGroup).filter(IdeaGroup.idea_id == idea["idea_id"]).one()
    assert group.name == f"Group: {idea['title']}"
    creator = db.query(GroupMember).filter(GroupMember.group_id == group.group_id).one()
    assert creator.user_id == seed_users["alice"].user_id
    assert creator.role == "CREATOR"

    me = client.get("/api/users/me", headers=headers).json()
    assert me["xp_points"] == 50

    actions = [a.action for a in db.query(AuditLog).filter(AuditLog.entity_type == "Idea").all()]
    assert actions == ["CREATE"]


def test_create_idea_requires_fields(client, seed_users):
    headers = auth_headers(client, "alice")
    resp = client.post(
        "/api/ideas",
        json={"title": "   ", "description": "desc", "category": "General"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Title is required"

    missing = client.post("/api/ideas", json={"title": "Only title"}, headers=headers)
    assert missing.status_code == 400


def test_get_increments_view_count(client, alice_idea):
    headers = auth_headers(client, "bob")
    first = client.get(f"/api/ideas/{alice_idea['idea_id']}", headers=headers).json()
    second = client.get(f"/api/ideas/{alice_idea['idea_id']}", headers=headers).json()
    assert second["view_count"] == first["view_count"] + 1


def test_views_likes_and_comments_keep_updated_at(client, alice_idea):
    bob = auth_headers(client, "bob")
    idea_id = alice_idea["idea_id"]
    client.get(f"/api/ideas/{idea_id}", headers=bob)
    client.post(f"/api/ideas/{idea_id}/like", headers=bob)
    client.post(f"/api/ideas/{idea_id}/comments", json={"content": "Count me in"}, headers=bob)
    client.delete(f"/api/ideas/{idea_id}/like", headers=bob)

    fetched = client.get(f"/api/ideas/{idea_id}", headers=bob).json()
    assert fetched["view_count"] == 2
    assert fetched["comment_count"] == 1
    assert fetched["updated_at"] == alice_idea["updated_at"]

    client.put(f"/api/ideas/{idea_id}", json={"title": "Shared parking calendar v2"}, headers=auth_headers(client, "alice"))
    edited = client.get(f"/api/ideas/{idea_id}", headers=bob).json()
    assert edited["updated_at"] != alice_idea["updated_at"]


def test_get_missing_idea_is_not_found(client, seed_users):
    resp = client.get("/api/ideas/9999", headers=auth_headers(client, "alice"))
    assert resp.status_code == 404
    body = resp.json()
    assert body["status"] == 404
    assert body["error"] == "Not Found"
    assert body["message"] == "Idea not found"


def test_update_by_author_replaces_tags(client, alice_idea):
    headers = auth_headers(client, "alice")
    resp = client.put(
        f"/api/ideas/{alice_idea['idea_id']}",
        json={"title": "Parking calendar v2", "tags": ["calendar", "parking", "calendar"]},
        headers=headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["title"] == "Parking calendar v2"
    assert data["description"] == alice_idea["description"]
    assert data["tags"] == ["calendar", "parking"]


def test_update_by_other_user_forbidden_but_admin_allowed(client, alice_idea):
    idea_id = alice_idea["idea_id"]
    resp = client.put(f"/api/ideas/{idea_id}", json={"title": "Hijack"}, headers=auth_headers(client, "bob"))
    assert resp.status_code == 403

    resp = client.put(f"/api/ideas/{idea_id}", json={"category": "Ops"}, headers=auth_headers(client, "admin"))
    assert resp.status_code == 200
    assert resp.json()["category"] == "Ops"


def test_delete_requires_admin(client, alice_idea):
    idea_id = alice_idea["idea_id"]
    assert client.delete(f"/api/ideas/{idea_id}", headers=auth_headers(client, "alice")).status_code == 403
    assert client.delete(f"/api/ideas/{idea_id}", headers=auth_headers(client, "pm")).status_code == 403

    admin_headers = auth_headers(client, "admin")
    assert client.delete(f"/api/ideas/{idea_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/ideas/{idea_id}", headers=admin_headers).status_code == 404


def test_delete_cascades_owned_rows(client, db, alice_idea):
    idea_id = alice_idea["idea_id"]
    bob = auth_headers(client, "bob")
    client.post(f"/api/ideas/{idea_id}/like", headers=bob)
    client.post(f"/api/ideas/{idea_id}/comments", json={"content": "Nice"}, headers=bob)
    client.post(f"/api/ideas/{idea_id}/checklist", json={"title": "Ask facilities"}, headers=auth_headers(client, "alice"))

    assert client.delete(f"/api/ideas/{idea_id}", headers=auth_headers(client, "admin")).status_code == 204
    assert db.query(IdeaGroup).filter(IdeaGroup.idea_id == idea_id).count() == 0
    deletes = db.query(AuditLog).filter(AuditLog.action == "DELETE", AuditLog.entity_id == idea_id).count()
    assert deletes == 1


def test_list_filters_search_and_pagination(client, seed_users):
    alice = auth_headers(client, "alice")
    bob = auth_headers(client, "bob")
    create_idea(client, alice, title="Green roof", description="Plants on top", category="Sustainability")
    create_idea(client, alice, title="Solar panels", description="Cheaper energy", category="Sustainability")
    create_idea(client, bob, title="Team lunch", description="Monthly ROOFTOP lunch", category="Culture")

    everything = client.get("/api/ideas", headers=alice).json()
    assert everything["total_elements"] == 3
    assert everything["content"][0]["title"] == "Team lunch"

    by_category = client.get("/api/ideas", params={"category": "Sustainability"}, headers=alice).json()
    assert {i["title"] for i in by_category["content"]} == {"Green roof", "Solar panels"}

    search = client.get("/api/ideas", params={"search": "roof"}, headers=alice).json()
    assert {i["title"] for i in search["content"]} == {"Green roof", "Team lunch"}

    by_author = client.get(
        "/api/ideas", params={"author_id": seed_users["bob"].user_id}, headers=alice
    ).json()
    assert [i["title"] for i in by_author["content"]] == ["Team lunch"]

    page = client.get("/api/ideas", params={"page": 1, "size": 2}, headers=alice).json()
    assert page["total_pages"] == 2
    assert page["number"] == 1
    assert page["size"] == 2
    assert page["first"] is False
    assert page["last"] is True
    assert len(page["content"]) == 1


def test_list_marks_ideas_liked_by_current_user(client, alice_idea):
    bob = auth_headers(client, "bob")
    client.post(f"/api/ideas/{alice_idea['idea_id']}/like", headers=bob)
    listed = client.get("/api/ideas", headers=bob).json()["content"]
    assert listed[0]["is_liked_by_current_user"] is True
    carol_view = client.get("/api/ideas", headers=auth_headers(client, "carol")).json()["content"]
    assert carol_view[0]["is_liked_by_current_user"] is False


def test_categories_and_popular_tags(client, seed_users):
    alice = auth_headers(client, "alice")
    create_idea(client, alice, category="Culture", tags=["food", "team"])
    create_idea(client, alice, category="Facilities", tags=["food"])

    categories = client.get("/api/ideas/categories", headers=alice).json()
    assert categories == ["Culture", "Facilities"]

    tags = client.get("/api/ideas/tags/popular", headers=alice).json()
    assert tags[0] == {"tag": "food", "count": 2}
    assert {"tag": "team", "count": 1} in tags
