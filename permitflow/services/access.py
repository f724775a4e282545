"""Role policy: which actions each role may perform.

Roles are a closed enum and every decision goes through an exhaustive match, so
adding a role fails type checking until each branch handles it.
"""

import enum
from typing import assert_never

from permitflow.models.enums import Role
from permitflow.schemas.auth import CurrentUser
from permitflow.services.errors import AuthorizationError


class Action(str, enum.Enum):
    CREATE_OWN_PERMIT = "create_own_permit"
    CREATE_PERMIT_FOR_OTHERS = "create_permit_for_others"
    READ_OWN = "read_own"
    READ_ANY_USER = "read_any_user"
    READ_ANY_PERMIT = "read_any_permit"
    UPDATE_ANY_TOKEN = "update_any_token"
    LIST_PENDING = "list_pending"
    DECIDE_PERMIT = "decide_permit"
    QUERY_PERMITS = "query_permits"
    VIEW_STATISTICS = "view_statistics"
    EXPORT_REPORTS = "export_reports"
    CREATE_USERS = "create_users"


_EMPLOYEE_ACTIONS = frozenset({Action.CREATE_OWN_PERMIT, Action.READ_OWN})

_HR_ACTIONS = _EMPLOYEE_ACTIONS | {
    Action.READ_ANY_USER,
    Action.READ_ANY_PERMIT,
    Action.LIST_PENDING,
    Action.DECIDE_PERMIT,
    Action.QUERY_PERMITS,
    Action.VIEW_STATISTICS,
}

_ADMIN_ACTIONS = frozenset(
    {
        Action.READ_OWN,
        Action.CREATE_OWN_PERMIT,
        Action.CREATE_PERMIT_FOR_OTHERS,
        Action.READ_ANY_USER,
        Action.READ_ANY_PERMIT,
        Action.UPDATE_ANY_TOKEN,
        Action.LIST_PENDING,
        Action.QUERY_PERMITS,
        Action.VIEW_STATISTICS,
        Action.EXPORT_REPORTS,
        Action.CREATE_USERS,
    }
)


def allowed_actions(role: Role) -> frozenset[Action]:
    match role:
        case Role.EMPLOYEE:
            return _EMPLOYEE_ACTIONS
        case Role.HR:
            return _HR_ACTIONS
        case Role.ADMIN:
            return _ADMIN_ACTIONS
        case _:
            assert_never(role)


def can(user: CurrentUser, action: Action) -> bool:
    return action in allowed_actions(user.role)


def ensure_allowed(user: CurrentUser, action: Action) -> None:
    """Raise AuthorizationError unless the user's role grants action."""
    if not can(user, action):
        raise AuthorizationError(f"Role {user.role.value} may not {action.value.replace('_', ' ')}.")


def ensure_self_or_allowed(user: CurrentUser, owner_id: int, action: Action) -> None:
    """Owners always pass; anyone else needs action."""
    if user.id == owner_id:
        return
    ensure_allowed(user, action)
