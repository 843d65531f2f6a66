"""
Unit Tests for the settings, users and question paper controllers
Tests for: key-based settings upsert, user activation, form validation
"""
import json

import pytest
from faker import Faker

from academix_admin.controllers.settings import SettingsController
from academix_admin.controllers.users import UsersController
from academix_admin.models.attachment import AttachmentPayload
from academix_admin.notifications import NotificationLevel
from academix_admin.services.settings import SettingsService
from academix_admin.services.users import UsersService

fake = Faker()


def envelope(data, message=None):
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


@pytest.fixture
def settings_controller(api_client, access, notifier):
    return SettingsController(SettingsService(api_client, access), notifier)


@pytest.fixture
def users_controller(api_client, access, notifier):
    return UsersController(UsersService(api_client, access), notifier)


class TestSettingsController:
    """Test key-based settings handling"""

    @pytest.mark.asyncio
    async def test_save_new_key_appends(self, settings_controller, backend):
        """Test saving an unknown key adds it to the list"""
        backend.add("PUT", "system-settings/site_name", json=envelope({"value": "Academix"}))

        setting = await settings_controller.save("site_name", "Academix")

        assert setting.key == "site_name"
        assert settings_controller.get_value("site_name") == "Academix"

    @pytest.mark.asyncio
    async def test_save_existing_key_replaces(self, settings_controller, backend):
        """Test saving a known key replaces it in place"""
        backend.add("GET", "system-settings", json=envelope({"settings": [
            {"key": "a", "value": "1"},
            {"key": "b", "value": "2"},
        ]}))
        backend.add("PUT", "system-settings/a", json=envelope({"setting": {"key": "a", "value": "10"}}))
        await settings_controller.load()

        await settings_controller.save("a", 10)

        assert settings_controller.as_dict() == {"a": "10", "b": "2"}
        assert [s.key for s in settings_controller.items] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_save_sends_string_value(self, settings_controller, backend):
        """Test values are sent as strings with optional fields"""
        backend.add("PUT", "system-settings/max_uploads", json=envelope({"key": "max_uploads", "value": "5"}))

        await settings_controller.save("max_uploads", 5, description="Per day", is_public=True)

        request = backend.calls("PUT", "system-settings/max_uploads")[0]
        assert json.loads(request.content) == {"value": "5", "description": "Per day", "is_public": True}

    @pytest.mark.asyncio
    async def test_create_without_key(self, settings_controller, backend, notifier):
        """Test a missing key fails without a request"""
        assert await settings_controller.create({"value": "x"}) is None

        assert backend.requests == []
        assert settings_controller.error == "Setting key is required"

    @pytest.mark.asyncio
    async def test_college_admin_cannot_save(self, settings_controller, backend, access):
        """Test the settings module is super admin only"""
        access.set_role("college_admin")

        assert await settings_controller.save("site_name", "X") is None

        assert backend.requests == []
        assert "does not have access to Settings" in settings_controller.error

    @pytest.mark.asyncio
    async def test_bulk_update(self, settings_controller, backend):
        """Test bulk update upserts every returned setting"""
        backend.add("POST", "system-settings/bulk-update", json=envelope({"settings": [
            {"key": "a", "value": "1"},
            {"key": "b", "value": "2"},
        ]}))

        assert await settings_controller.bulk_update([{"key": "a", "value": 1}, {"key": "b", "value": 2}])

        assert settings_controller.as_dict() == {"a": "1", "b": "2"}


class TestUsersController:
    """Test user activation and password change"""

    def _user(self, user_id, active=True):
        return {"id": user_id, "email": fake.email(), "full_name": fake.name(), "role": "teacher",
                "is_active": active}

    @pytest.mark.asyncio
    async def test_deactivate_patches_local_user(self, users_controller, backend):
        """Test deactivate flips is_active on the listed user"""
        backend.add("GET", "users", json=envelope({"users": [self._user("u1"), self._user("u2")]}))
        backend.add("PUT", "users/u1/deactivate", json=envelope(None, "User deactivated"))
        await users_controller.load()

        assert await users_controller.deactivate("u1") is True

        assert users_controller.get_local("u1").is_active is False
        assert users_controller.get_local("u2").is_active is True

    @pytest.mark.asyncio
    async def test_activate_failure(self, users_controller, backend, notifier):
        """Test a failed activate leaves the user and reports the error"""
        backend.add("GET", "users", json=envelope({"users": [self._user("u1", active=False)]}))
        backend.add("PUT", "users/u1/activate", status=404, json={"success": False, "message": "User not found"})
        await users_controller.load()

        assert await users_controller.activate("u1") is False

        assert users_controller.get_local("u1").is_active is False
        assert users_controller.error == "[404] User not found"
        assert notifier.last.title == "Failed to activate user"

    @pytest.mark.asyncio
    async def test_change_password_body(self, users_controller, backend):
        """Test password change uses the camelCase body"""
        backend.add("PUT", "users/u1/password", json=envelope(None))

        assert await users_controller.change_password("u1", "old-pass", "new-pass") is True

        request = backend.calls("PUT", "users/u1/password")[0]
        assert json.loads(request.content) == {"currentPassword": "old-pass", "newPassword": "new-pass"}


class TestQuestionPaperForm:
    """Test question paper validation before create"""

    @pytest.mark.asyncio
    async def test_invalid_values_make_no_request(self, papers_controller, paper_service, notifier):
        """Test invalid year and semester stop the create"""
        result = await papers_controller.create_with_pdf(
            {"title": "Networks", "subject": "CS301", "year": 5, "semester": 9}
        )

        assert result is None
        assert paper_service.create_calls == []
        assert "Year must be between 1 and 4" in papers_controller.error
        assert "Semester must be between 1 and 8" in papers_controller.error
        assert notifier.last.level == NotificationLevel.ERROR

    @pytest.mark.asyncio
    async def test_wrong_attachment_purpose(self, papers_controller, paper_service, paper_metadata):
        """Test a cover attachment is refused for question papers"""
        cover = AttachmentPayload.from_bytes("cover", "c.png", b"img")

        assert await papers_controller.create_with_pdf(paper_metadata(), cover) is None
        assert paper_service.create_calls == []

    @pytest.mark.asyncio
    async def test_valid_paper_with_pdf(self, papers_controller, paper_service, paper_metadata):
        """Test a valid paper is created and its PDF uploaded"""
        pdf = AttachmentPayload.from_bytes("pdf", "paper.pdf", b"%PDF-1.4")

        paper = await papers_controller.create_with_pdf(paper_metadata(year=2, semester=3), pdf)

        assert paper.has_pdf
        assert papers_controller.by_year_semester(2, 3) == [paper]
        assert paper_service.upload_calls == [(paper.id, "pdf", "paper.pdf", 8)]
