"""CSV and PDF exports for managers."""

import csv
import io

from tests.conftest import auth_headers, create_idea


def _rows(resp):
    return list(csv.reader(io.StringIO(resp.text)))


def test_export_requires_manager_role(client, seed_users):
    resp = client.get("/api/export/ideas/csv", headers=auth_headers(client, "alice"))
    assert resp.status_code == 403
    assert client.get("/api/export/ideas/csv", headers=auth_headers(client, "admin")).status_code == 200


def test_ideas_csv(client, alice_idea):
    resp = client.get("/api/export/ideas/csv", headers=auth_headers(client, "pm"))
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert 'filename="ideas_' in resp.headers["content-disposition"]

    rows = _rows(resp)
    assert rows[0][:3] == ["ID", "Title", "Description"]
    assert rows[1][1] == alice_idea["title"]
    assert rows[1][5] == "0%"
    assert rows[1][6] == "alice"


def test_users_csv(client, seed_users):
    rows = _rows(client.get("/api/export/users/csv", headers=auth_headers(client, "pm")))
    usernames = [r[1] for r in rows[1:]]
    assert usernames == ["alice", "bob", "carol", "pm", "admin", "ghost"]
    ghost = rows[-1]
    assert ghost[11] == "No"


def test_statistics_csv(client, seed_users):
    alice = auth_headers(client, "alice")
    create_idea(client, alice, category="Facilities")
    create_idea(client, alice, title="Green roof", category="Sustainability")
    create_idea(client, alice, title="Solar panels", category="Sustainability")

    rows = dict(_rows(client.get("/api/export/statistics/csv", headers=auth_headers(client, "pm")))[1:])
    assert rows["Total Ideas"] == "3"
    assert rows["Ideas - CONCEPT"] == "3"
    assert rows["Ideas - COMPLETED"] == "0"
    assert rows["Total Users"] == "5"
    assert rows["Category - Sustainability"] == "2"


def test_statistics_pdf(client, alice_idea):
    resp = client.get("/api/export/statistics/pdf", headers=auth_headers(client, "pm"))
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")
