"""
Unit tests for the admin applications API.

Tests:
- Listing with search, status filter and sort
- Detail view
- Triage updates (status and notes)
- Stats
- Access control
- Malformed stored records
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import OperationalError

from recruiting.core.deps import get_transition_policy
from recruiting.core.security import get_password_hash
from recruiting.models.admin_user import AdminUser
from recruiting.models.application import Application
from recruiting.services.lifecycle import TransitionPolicy
from main import api_app

LIST_URL = "/api/v1/applications"
UPLOADED_AT = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestListApplications:
    """Test the dashboard list endpoint"""

    def test_list_newest_first(self, client, auth_headers, make_application):
        make_application(name="First")
        make_application(name="Second")
        make_application(name="Third")

        response = client.get(LIST_URL, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["count"] == 3
        assert [a["name"] for a in data["applications"]] == ["Third", "Second", "First"]

    def test_empty_list(self, client, auth_headers):
        response = client.get(LIST_URL, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"total": 0, "count": 0, "applications": []}

    def test_search(self, client, auth_headers, make_application):
        make_application(name="Jane Doe", email="jane@example.com")
        make_application(name="John Roe", email="john@example.com")

        response = client.get(LIST_URL, params={"search": "jane"}, headers=auth_headers)

        data = response.json()
        assert data["total"] == 2
        assert data["count"] == 1
        assert data["applications"][0]["name"] == "Jane Doe"

    def test_status_filter_and_name_sort(self, client, auth_headers, make_application):
        make_application(name="zoe", status="contacted")
        make_application(name="Adam", status="contacted")
        make_application(name="Mia", status="new")

        response = client.get(
            LIST_URL,
            params={"status": "contacted", "sort": "name"},
            headers=auth_headers
        )

        data = response.json()
        assert data["count"] == 2
        assert [a["name"] for a in data["applications"]] == ["Adam", "zoe"]

    def test_oldest_first(self, client, auth_headers, make_application):
        make_application(name="First")
        make_application(name="Second")

        response = client.get(LIST_URL, params={"sort": "oldest"}, headers=auth_headers)

        assert [a["name"] for a in response.json()["applications"]] == ["First", "Second"]

    def test_unknown_status_filter(self, client, auth_headers):
        response = client.get(LIST_URL, params={"status": "archived"}, headers=auth_headers)

        assert response.status_code == 422

    def test_unknown_sort(self, client, auth_headers):
        response = client.get(LIST_URL, params={"sort": "random"}, headers=auth_headers)

        assert response.status_code == 422

    def test_malformed_rows_are_skipped(self, client, auth_headers, make_application):
        make_application(name="Valid")
        make_application(name="Unknown Status", status="archived")
        make_application(name="Half Video", video_url="https://cdn.example.com/1-abc.mp4")

        response = client.get(LIST_URL, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert [a["name"] for a in data["applications"]] == ["Valid"]


class TestGetApplication:
    """Test the detail endpoint"""

    def test_get_with_video(self, client, auth_headers, make_application):
        application = make_application(
            name="Jane Doe",
            video_url="https://cdn.example.com/1-abc.mp4",
            video_filename="intro.mp4",
            video_size=1536,
            video_uploaded_at=UPLOADED_AT,
        )

        response = client.get(f"{LIST_URL}/{application.id}", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(application.id)
        assert data["video_filename"] == "intro.mp4"
        assert data["video_size_display"] == "1.5 KB"
        assert data["has_notes"] is False

    def test_get_without_video(self, client, auth_headers, make_application):
        application = make_application()

        response = client.get(f"{LIST_URL}/{application.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["video_size_display"] is None

    def test_get_not_found(self, client, auth_headers):
        response = client.get(f"{LIST_URL}/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == 404

    def test_get_malformed(self, client, auth_headers, make_application):
        application = make_application(status="archived")

        response = client.get(f"{LIST_URL}/{application.id}", headers=auth_headers)

        assert response.status_code == 422

    def test_is_terminal(self, client, auth_headers, make_application):
        hired = make_application(status="hired")
        fresh = make_application(status="new")

        assert client.get(f"{LIST_URL}/{hired.id}", headers=auth_headers).json()["is_terminal"] is True
        assert client.get(f"{LIST_URL}/{fresh.id}", headers=auth_headers).json()["is_terminal"] is False


class TestUpdateApplication:
    """Test triage updates"""

    def test_update_status_and_notes(self, client, auth_headers, make_application, db_session):
        application = make_application(name="Jane Doe")

        response = client.patch(
            f"{LIST_URL}/{application.id}",
            json={"status": "contacted", "notes": "Sent Calendly link"},
            headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "contacted"
        assert data["notes"] == "Sent Calendly link"
        assert data["has_notes"] is True
        assert data["name"] == "Jane Doe"

        listing = client.get(LIST_URL, headers=auth_headers).json()
        assert listing["applications"][0]["status"] == "contacted"
        assert listing["applications"][0]["notes"] == "Sent Calendly link"

    def test_update_clears_notes(self, client, auth_headers, make_application):
        application = make_application(notes="Old note")

        response = client.patch(
            f"{LIST_URL}/{application.id}",
            json={"status": "new", "notes": None},
            headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["notes"] is None

    def test_update_not_found(self, client, auth_headers, make_application, db_session):
        application = make_application()

        response = client.patch(
            f"{LIST_URL}/{uuid.uuid4()}",
            json={"status": "hired", "notes": "x"},
            headers=auth_headers
        )

        assert response.status_code == 404
        db_session.refresh(application)
        assert application.status == "new"
        assert application.notes is None

    def test_update_invalid_status(self, client, auth_headers, make_application):
        application = make_application()

        response = client.patch(
            f"{LIST_URL}/{application.id}",
            json={"status": "archived"},
            headers=auth_headers
        )

        assert response.status_code == 422

    def test_reopen_rejected_with_default_policy(self, client, auth_headers, make_application):
        application = make_application(status="rejected")

        response = client.patch(
            f"{LIST_URL}/{application.id}",
            json={"status": "contacted"},
            headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "contacted"

    def test_locked_terminal_status(self, client, auth_headers, make_application, db_session):
        api_app.dependency_overrides[get_transition_policy] = lambda: TransitionPolicy.LOCK_TERMINAL
        application = make_application(status="hired")

        response = client.patch(
            f"{LIST_URL}/{application.id}",
            json={"status": "new"},
            headers=auth_headers
        )

        assert response.status_code == 409
        db_session.refresh(application)
        assert application.status == "hired"

    def test_repair_unknown_stored_status(self, client, auth_headers, make_application):
        application = make_application(status="archived")

        response = client.patch(
            f"{LIST_URL}/{application.id}",
            json={"status": "new"},
            headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "new"

    def test_update_commit_failure(self, client, auth_headers, make_application, db_session, monkeypatch):
        application = make_application()

        def failing_commit():
            raise OperationalError("UPDATE applications", {}, Exception("database is locked"))

        monkeypatch.setattr(db_session, "commit", failing_commit)

        response = client.patch(
            f"{LIST_URL}/{application.id}",
            json={"status": "hired", "notes": "Offer sent"},
            headers=auth_headers
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to save changes"

        monkeypatch.undo()
        db_session.refresh(application)
        assert application.status == "new"
        assert application.notes is None


class TestApplicationStats:

    def test_stats(self, client, auth_headers, make_application):
        make_application(status="new")
        make_application(status="new")
        make_application(status="hired")

        response = client.get(f"{LIST_URL}/stats", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["by_status"]["new"] == 2
        assert data["by_status"]["hired"] == 1
        assert data["by_status"]["rejected"] == 0
        assert len(data["by_status"]) == 6

    def test_stats_total_matches_list_total(self, client, auth_headers, make_application):
        make_application(status="contacted")
        make_application(status="archived")

        stats = client.get(f"{LIST_URL}/stats", headers=auth_headers).json()
        listing = client.get(LIST_URL, headers=auth_headers).json()

        assert stats["total"] == 1
        assert stats["total"] == listing["total"]
        assert stats["by_status"]["contacted"] == 1
        assert sum(stats["by_status"].values()) == stats["total"]


class TestAccessControl:

    def test_requires_authentication(self, client, make_application):
        application = make_application()

        for response in (
            client.get(LIST_URL),
            client.get(f"{LIST_URL}/stats"),
            client.get(f"{LIST_URL}/{application.id}"),
            client.patch(f"{LIST_URL}/{application.id}", json={"status": "hired"}),
        ):
            assert response.status_code in (401, 403)

    def test_invalid_token(self, client):
        response = client.get(LIST_URL, headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401

    def test_rejects_non_admin(self, client, db_session):
        db_session.add(AdminUser(
            id=uuid.uuid4(),
            email="viewer@example.com",
            hashed_password=get_password_hash("ViewerPass123!"),
            is_admin=False,
        ))
        db_session.commit()
        token = client.post(
            "/api/v1/auth/login",
            json={"email": "viewer@example.com", "password": "ViewerPass123!"}
        ).json()["access_token"]

        response = client.get(LIST_URL, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403
        assert "admin" in response.json()["detail"].lower()

    def test_no_mutation_without_auth(self, client, make_application, db_session):
        application = make_application()

        client.patch(f"{LIST_URL}/{application.id}", json={"status": "hired"})

        assert db_session.get(Application, application.id).status == "new"


class TestHealth:

    def test_basic_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"
        assert client.get("/api/v1/health").json()["status"] == "healthy"

    def test_detailed_health(self, client):
        response = client.get("/api/v1/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["status"] == "healthy"
        assert data["checks"]["storage"]["status"] == "healthy"
        assert data["checks"]["notifications"]["status"] == "enabled"

    def test_detailed_health_storage_down(self, client, storage):
        storage.fail_with = RuntimeError("down")

        data = client.get("/api/v1/health/detailed").json()

        assert data["status"] == "unhealthy"
        assert data["checks"]["storage"]["status"] == "unhealthy"
