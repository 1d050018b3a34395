"""XP, levels and badges."""

from ideaboard.models.notification import Notification
from ideaboard.services.gamification_service import level_for_xp, xp_for_next_level
from tests.conftest import auth_headers, create_idea


def test_level_thresholds():
    assert level_for_xp(0) == 1
    assert level_for_xp(99) == 1
    assert level_for_xp(100) == 2
    assert level_for_xp(599) == 3
    assert level_for_xp(2800) == 8
    assert level_for_xp(10000) == 8
    assert xp_for_next_level(1) == 100
    assert xp_for_next_level(8) is None


def test_first_idea_badge(client, seed_users):
    alice = auth_headers(client, "alice")
    badges = {b["name"]: b for b in client.get("/api/users/me/badges", headers=alice).json()}
    assert badges["first_idea"]["earned"] is False

    create_idea(client, alice)
    badges = {b["name"]: b for b in client.get("/api/users/me/badges", headers=alice).json()}
    assert badges["first_idea"]["earned"] is True
    assert badges["first_idea"]["earned_at"] is not None
    assert badges["idea_machine"]["earned"] is False
    # badge rewards are informational; XP comes from actions only
    assert client.get("/api/users/me", headers=alice).json()["xp_points"] == 50


def test_level_up_notification(client, seed_users, db):
    alice = auth_headers(client, "alice")
    create_idea(client, alice)
    create_idea(client, alice, title="Second idea")

    me = client.get("/api/users/me", headers=alice).json()
    assert me["xp_points"] == 100
    assert me["level"] == 2

    level_ups = (
        db.query(Notification)
        .filter(Notification.user_id == seed_users["alice"].user_id, Notification.noti_type == "LEVEL_UP")
        .all()
    )
    assert len(level_ups) == 1
    assert "Level 2" in level_ups[0].message


def test_received_likes_and_comments_award_xp(client, alice_idea):
    bob = auth_headers(client, "bob")
    client.post(f"/api/ideas/{alice_idea['idea_id']}/like", headers=bob)
    client.post(f"/api/ideas/{alice_idea['idea_id']}/comments", json={"content": "Nice"}, headers=bob)

    assert client.get("/api/users/me", headers=auth_headers(client, "alice")).json()["xp_points"] == 60
    assert client.get("/api/users/me", headers=bob).json()["xp_points"] == 5
