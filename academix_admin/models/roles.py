"""
User roles, access modules and the permission table between them.
"""

from enum import Enum
from typing import Dict, List, Optional


class UserRole(str, Enum):
    """Roles carried in the session token, highest priority first"""
    SUPER_ADMIN = "super_admin"
    COLLEGE_ADMIN = "college_admin"
    TEACHER = "teacher"
    STAFF = "staff"
    GUEST = "guest"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def priority(self) -> int:
        return _ROLE_PRIORITY[self]

    @property
    def is_admin(self) -> bool:
        return self in (UserRole.SUPER_ADMIN, UserRole.COLLEGE_ADMIN)

    def outranks(self, other: "UserRole") -> bool:
        return self.priority > other.priority

    def subordinate_roles(self) -> List["UserRole"]:
        return [role for role in UserRole if role.priority < self.priority]

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["UserRole"]:
        """Case-insensitive lookup; unknown or empty values give None"""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_ROLE_PRIORITY: Dict[UserRole, int] = {
    UserRole.SUPER_ADMIN: 100,
    UserRole.COLLEGE_ADMIN: 50,
    UserRole.TEACHER: 30,
    UserRole.STAFF: 20,
    UserRole.GUEST: 10,
}


class AccessModule(str, Enum):
    """Functional areas of the admin console"""
    DASHBOARD = "dashboard"
    USERS = "users"
    STUDENTS = "students"
    COLLEGES = "colleges"
    BOOKS = "books"
    QUESTION_PAPERS = "question_papers"
    AUTH_LOGS = "auth_logs"
    REPORTS = "reports"
    SETTINGS = "settings"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def requires_admin_access(self) -> bool:
        return self in _SUPER_ADMIN_ONLY or self == AccessModule.AUTH_LOGS

    @classmethod
    def from_string(cls, value: Optional[str]) -> Optional["AccessModule"]:
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_SUPER_ADMIN_ONLY = (AccessModule.USERS, AccessModule.COLLEGES, AccessModule.SETTINGS)
_ADMIN_WRITABLE = (AccessModule.STUDENTS, AccessModule.BOOKS, AccessModule.QUESTION_PAPERS)


class RolePermissions:
    """Static role → module table"""

    PERMISSIONS: Dict[UserRole, List[AccessModule]] = {
        UserRole.SUPER_ADMIN: list(AccessModule),
        UserRole.COLLEGE_ADMIN: [
            AccessModule.DASHBOARD,
            AccessModule.STUDENTS,
            AccessModule.BOOKS,
            AccessModule.QUESTION_PAPERS,
        ],
        UserRole.TEACHER: [AccessModule.DASHBOARD, AccessModule.STUDENTS],
        UserRole.STAFF: [AccessModule.DASHBOARD],
        UserRole.GUEST: [AccessModule.DASHBOARD],
    }

    @classmethod
    def modules_for_role(cls, role: UserRole) -> List[AccessModule]:
        return list(cls.PERMISSIONS.get(role, []))

    @classmethod
    def has_module_access(cls, role: UserRole, module: AccessModule) -> bool:
        return module in cls.PERMISSIONS.get(role, [])

    @classmethod
    def roles_for_module(cls, module: AccessModule) -> List[UserRole]:
        return [role for role, modules in cls.PERMISSIONS.items() if module in modules]

    @classmethod
    def can_modify(cls, role: UserRole, module: AccessModule) -> bool:
        """Write permission; dashboard, reports and auth logs are read-only"""
        if module in _SUPER_ADMIN_ONLY:
            return role == UserRole.SUPER_ADMIN
        if module in _ADMIN_WRITABLE:
            return role.is_admin
        return False

    @classmethod
    def navigation_modules(cls, role: UserRole) -> List[AccessModule]:
        return [m for m in cls.modules_for_role(role) if m != AccessModule.SETTINGS]
