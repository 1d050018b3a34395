"""Status workflow: role checks, forced progress and completion XP."""

from ideaboard.models.audit_log import AuditLog
from ideaboard.models.notification import Notification
from tests.conftest import auth_headers


def _set_status(client, idea_id, status, username="pm"):
    return client.put(f"/api/ideas/{idea_id}/status", json={"status": status}, headers=auth_headers(client, username))


def _xp(client, username):
    return client.get("/api/users/me", headers=auth_headers(client, username)).json()["xp_points"]


def test_employee_cannot_change_status(client, alice_idea):
    resp = _set_status(client, alice_idea["idea_id"], "IN_PROGRESS", username="alice")
    assert resp.status_code == 403


def test_admin_can_change_status(client, alice_idea):
    resp = _set_status(client, alice_idea["idea_id"], "IN_PROGRESS", username="admin")
    assert resp.status_code == 200
    assert resp.json()["status"] == "IN_PROGRESS"


def test_invalid_status_rejected(client, alice_idea):
    assert _set_status(client, alice_idea["idea_id"], "ARCHIVED").status_code == 400


def test_completed_forces_full_progress_and_awards_xp_once(client, alice_idea):
    idea_id = alice_idea["idea_id"]
    before = _xp(client, "alice")

    resp = _set_status(client, idea_id, "COMPLETED")
    assert resp.status_code == 200
    assert resp.json()["progress_percentage"] == 100
    assert _xp(client, "alice") == before + 100

    again = _set_status(client, idea_id, "COMPLETED")
    assert again.status_code == 200
    assert _xp(client, "alice") == before + 100


def test_completion_xp_awarded_per_transition(client, alice_idea):
    idea_id = alice_idea["idea_id"]
    before = _xp(client, "alice")
    _set_status(client, idea_id, "COMPLETED")
    _set_status(client, idea_id, "IN_PROGRESS")
    _set_status(client, idea_id, "COMPLETED")
    assert _xp(client, "alice") == before + 200


def test_concept_forces_zero_progress(client, alice_idea):
    idea_id = alice_idea["idea_id"]
    _set_status(client, idea_id, "COMPLETED")
    resp = _set_status(client, idea_id, "CONCEPT")
    assert resp.json()["progress_percentage"] == 0


def test_in_progress_keeps_checklist_progress(client, alice_idea):
    idea_id = alice_idea["idea_id"]
    alice = auth_headers(client, "alice")
    item = client.post(f"/api/ideas/{idea_id}/checklist", json={"title": "Draft"}, headers=alice).json()
    client.post(f"/api/ideas/{idea_id}/checklist", json={"title": "Review"}, headers=alice)
    client.put(f"/api/ideas/{idea_id}/checklist/{item['item_id']}/toggle", headers=alice)

    resp = _set_status(client, idea_id, "IN_PROGRESS")
    assert resp.json()["progress_percentage"] == 50


def test_status_change_notifies_author_and_audits(client, db, alice_idea, seed_users):
    idea_id = alice_idea["idea_id"]
    _set_status(client, idea_id, "IN_PROGRESS")

    notes = (
        db.query(Notification)
        .filter(Notification.user_id == seed_users["alice"].user_id, Notification.noti_type == "STATUS_CHANGE")
        .all()
    )
    assert len(notes) == 1
    assert "Concept" in notes[0].message and "In Progress" in notes[0].message
    assert notes[0].link == f"/ideas/{idea_id}"

    audit = db.query(AuditLog).filter(AuditLog.action == "STATUS_CHANGE").one()
    assert '"CONCEPT"' in audit.old_value
    assert '"IN_PROGRESS"' in audit.new_value


def test_same_status_is_silent(client, db, alice_idea):
    _set_status(client, alice_idea["idea_id"], "CONCEPT")
    assert db.query(Notification).filter(Notification.noti_type == "STATUS_CHANGE").count() == 0
    assert db.query(AuditLog).filter(AuditLog.action == "STATUS_CHANGE").count() == 0
