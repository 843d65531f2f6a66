"""
Unit Tests for the students, individual users and dashboard controllers
Tests for: registration, filtering, account toggles, password changes, dashboard loading
"""
import json

import pytest
from faker import Faker

from academix_admin.controllers.dashboard import DashboardController
from academix_admin.controllers.students import IndividualUsersController, StudentsController
from academix_admin.notifications import NotificationLevel
from academix_admin.services.dashboard import DashboardService
from academix_admin.services.students import IndividualUsersService, StudentsService

fake = Faker()


def envelope(data):
    return {"success": True, "data": data}


def account(user_id, active=True, role="student"):
    return {
        "id": user_id,
        "email": fake.email(),
        "full_name": fake.name(),
        "role": role,
        "is_active": active,
    }


@pytest.fixture
def students_controller(api_client, access, notifier):
    return StudentsController(StudentsService(api_client, access), notifier)


@pytest.fixture
def individual_users_controller(api_client, access, notifier):
    return IndividualUsersController(IndividualUsersService(api_client, access), notifier)


@pytest.fixture
def dashboard_controller(api_client, access, notifier):
    return DashboardController(DashboardService(api_client, access), notifier)


class TestStudentsController:
    """Test the student list"""

    @pytest.mark.asyncio
    async def test_register_appends_student(self, students_controller, backend, notifier):
        """Test a registered student is listed and announced by name"""
        backend.add("GET", "users", json=envelope({"users": [account("s1")]}))
        new_student = {**account("s2"), "full_name": "Kavya Iyer"}
        backend.add("POST", "auth/register", status=201, json=envelope({"user": new_student}))
        await students_controller.load()

        student = await students_controller.register({"full_name": "Kavya Iyer", "email": "kavya@example.edu"})

        assert student.id == "s2"
        assert [s.id for s in students_controller.items] == ["s1", "s2"]
        assert students_controller.total_items == 2
        assert notifier.last.message == 'Student "Kavya Iyer" registered successfully'

    @pytest.mark.asyncio
    async def test_failed_register_keeps_list(self, students_controller, backend):
        """Test a rejected registration changes nothing"""
        backend.add("POST", "auth/register", status=400, json={"success": False, "message": "Email already in use"})

        assert await students_controller.register({"email": "dup@example.edu"}) is None

        assert students_controller.items == []
        assert students_controller.error == "Failed to create student: [400] Email already in use"

    @pytest.mark.asyncio
    async def test_filter_by_college_keeps_search(self, students_controller, backend):
        """Test filters combine and each change reloads from page one"""
        backend.add("GET", "users", json=envelope({"users": [account("s1")]}))

        await students_controller.search_students("  ravi ")
        await students_controller.filter_by_college("42")

        params = backend.requests[-1].url.params
        assert params["search"] == "ravi"
        assert params["collegeId"] == "42"
        assert params["role"] == "student"
        assert params["page"] == "1"

    @pytest.mark.asyncio
    async def test_clear_filters(self, students_controller, backend):
        """Test clearing filters sends only paging and role"""
        backend.add("GET", "users", json=envelope({"users": []}))
        await students_controller.search_students("ravi")

        await students_controller.clear_filters()

        assert set(backend.requests[-1].url.params.keys()) == {"page", "limit", "role"}

    @pytest.mark.asyncio
    async def test_deactivate_patches_local_student(self, students_controller, backend, notifier):
        """Test deactivation updates the listed student and uses the student label"""
        backend.add("GET", "users", json=envelope({"users": [account("s1"), account("s2")]}))
        backend.add("PUT", "users/s1/deactivate", json=envelope(None))
        await students_controller.load()

        assert await students_controller.deactivate("s1") is True

        assert students_controller.get_local("s1").is_active is False
        assert students_controller.active_count == 1
        assert notifier.last.title == "Student deactivated"

    @pytest.mark.asyncio
    async def test_teacher_cannot_activate(self, students_controller, access, notifier):
        """Test a role refusal is reported and nothing changes"""
        access.set_role("teacher")

        assert await students_controller.activate("s1") is False

        assert notifier.last.title == "Failed to activate student"
        assert "Teacher" in students_controller.error

    @pytest.mark.asyncio
    async def test_change_password(self, students_controller, backend):
        """Test the student password change sends both passwords"""
        backend.add("PUT", "users/s1/password", json=envelope(None))

        assert await students_controller.change_password("s1", "old-pass", "new-pass") is True

        body = json.loads(backend.calls("PUT", "users/s1/password")[0].content)
        assert body == {"currentPassword": "old-pass", "newPassword": "new-pass"}

    @pytest.mark.asyncio
    async def test_my_books_failure(self, students_controller, backend):
        """Test a failed book fetch returns an empty list with the reason recorded"""
        backend.add("GET", "books/my-books", status=500, json={"success": False, "message": "Down"})

        assert await students_controller.my_books() == []

        assert students_controller.error == "[500] Down"


class TestIndividualUsersController:
    """Test the individual user list"""

    @pytest.mark.asyncio
    async def test_activate(self, individual_users_controller, backend):
        """Test activation patches the listed account"""
        backend.add("GET", "individual-users", json=envelope({"users": [account("i1", active=False, role=None)]}))
        backend.add("PUT", "individual-users/i1/activate", json=envelope(None))
        await individual_users_controller.load()

        assert await individual_users_controller.activate("i1") is True

        assert individual_users_controller.get_local("i1").is_active is True

    @pytest.mark.asyncio
    async def test_reset_password_failure(self, individual_users_controller, backend, notifier):
        """Test a failed reset is reported"""
        backend.add("PUT", "individual-users/i1/password", status=404,
                    json={"success": False, "message": "User not found"})

        assert await individual_users_controller.reset_password("i1", "Secret#123") is False

        assert individual_users_controller.error == "[404] User not found"
        assert notifier.last.level == NotificationLevel.ERROR

    @pytest.mark.asyncio
    async def test_search_users(self, individual_users_controller, backend):
        """Test search reloads with the query"""
        backend.add("GET", "individual-users", json=envelope([]))

        await individual_users_controller.search_users("kumar")

        assert backend.requests[-1].url.params["search"] == "kumar"


class TestDashboardController:
    """Test dashboard loading and actions"""

    @pytest.mark.asyncio
    async def test_load(self, dashboard_controller, backend):
        """Test stats and activity are stored together"""
        backend.add("GET", "dashboard/stats", json=envelope({"total_users": 12, "active_users": 9}))
        backend.add("GET", "dashboard/activities", json=envelope({"activities": [
            {"id": "a1", "action": "book_created", "description": "Added Algorithms"},
        ]}))

        assert await dashboard_controller.load() is True

        assert dashboard_controller.stats.total_users == 12
        assert dashboard_controller.state.activities[0].description == "Added Algorithms"
        assert not dashboard_controller.state.is_loading

    @pytest.mark.asyncio
    async def test_load_failure_keeps_previous(self, dashboard_controller, backend, notifier):
        """Test a failed activity fetch keeps the earlier figures"""
        backend.add("GET", "dashboard/stats", json=envelope({"total_users": 12}))
        backend.add("GET", "dashboard/activities", json=envelope({"activities": []}))
        await dashboard_controller.load()
        backend.add("GET", "dashboard/activities", status=503, json={"success": False, "message": "Busy"})

        assert await dashboard_controller.load() is False

        assert dashboard_controller.stats.total_users == 12
        assert dashboard_controller.error == "[503] Busy"
        assert notifier.last.title == "Failed to load dashboard"

    @pytest.mark.asyncio
    async def test_auth_logs(self, dashboard_controller, backend):
        """Test log rows and total are kept in state"""
        backend.add("GET", "auth/logs", json=envelope({
            "logs": [{"id": "l1", "action": "logout"}, {"id": "l2", "action": "login"}],
            "total_count": 30,
        }))

        assert await dashboard_controller.load_auth_logs(limit=2) is True

        assert [log.id for log in dashboard_controller.state.auth_logs] == ["l1", "l2"]
        assert dashboard_controller.state.auth_log_total == 30

    @pytest.mark.asyncio
    async def test_update_user_status(self, dashboard_controller, backend, notifier):
        """Test a status change is announced"""
        backend.add("PATCH", "users/u1/status", json=envelope(None))

        assert await dashboard_controller.update_user_status("u1", "inactive") is True

        assert notifier.last.message == "User u1 is now inactive"

    @pytest.mark.asyncio
    async def test_export_failure(self, dashboard_controller, backend, tmp_path):
        """Test a failed export returns False with the reason"""
        backend.add("GET", "export/users/csv", status=403, json={"success": False, "message": "Forbidden"})

        assert await dashboard_controller.export_users_csv(str(tmp_path / "users.csv")) is False

        assert dashboard_controller.error == "[403] Forbidden"
