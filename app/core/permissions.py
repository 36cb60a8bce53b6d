"""Access control: one decision function for every endpoint.

``authorize(identity, action, resource)`` is evaluated in a fixed order, the
first failing check wins:

1. no identity                               -> UNAUTHENTICATED
2. self role-change / self-delete            -> CONFLICT (every role)
3. role not allowed to perform the action    -> UNAUTHORIZED
4. resource required but not found           -> NOT_FOUND
5. ownership (ADMIN bypasses)                -> UNAUTHORIZED

Ownership of an application is derived from its job posting: callers build
the ``Resource`` from the posting's ``owner_id`` and the application's
``user_id``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional
from uuid import UUID

import structlog

from app.core.exceptions import ErrorKind, PortalError, error_for
from app.core.identity import CurrentUser
from app.utils.constants import Role

logger = structlog.get_logger(__name__)


class Action(str, Enum):
    """Everything the portal lets a caller do."""

    # Users (admin console)
    USER_LIST = "users:list"
    USER_READ = "users:read"
    USER_CHANGE_ROLE = "users:change_role"
    USER_DELETE = "users:delete"

    # Own profile
    PROFILE_READ = "profile:read"
    PROFILE_UPDATE = "profile:update"

    # Job postings
    JOB_LIST_OPEN = "jobs:list_open"
    JOB_LIST_ALL = "jobs:list_all"
    JOB_CREATE = "jobs:create"
    JOB_READ = "jobs:read"
    JOB_UPDATE = "jobs:update"
    JOB_LIST_APPLICATIONS = "jobs:list_applications"
    DASHBOARD_COUNTS = "dashboard:counts"

    # Applications
    APPLICATION_CREATE = "applications:create"
    APPLICATION_LIST_OWN = "applications:list_own"
    APPLICATION_CANCEL = "applications:cancel"
    APPLICATION_READ = "applications:read"
    APPLICATION_UPDATE_STATUS = "applications:update_status"
    APPLICATION_LIST_ALL = "applications:list_all"


ALL_ROLES = frozenset(Role)
ADMIN_ONLY = frozenset({Role.ADMIN})
EMPLOYER_OR_ADMIN = frozenset({Role.EMPLOYER, Role.ADMIN})
STUDENT_ONLY = frozenset({Role.STUDENT})

# Which roles may attempt an action at all
ACTION_ROLES = {
    Action.USER_LIST: ADMIN_ONLY,
    Action.USER_READ: ADMIN_ONLY,
    Action.USER_CHANGE_ROLE: ADMIN_ONLY,
    Action.USER_DELETE: ADMIN_ONLY,
    Action.PROFILE_READ: ALL_ROLES,
    Action.PROFILE_UPDATE: ALL_ROLES,
    Action.JOB_LIST_OPEN: ALL_ROLES,
    Action.JOB_LIST_ALL: ADMIN_ONLY,
    Action.JOB_CREATE: EMPLOYER_OR_ADMIN,
    Action.JOB_READ: EMPLOYER_OR_ADMIN,
    Action.JOB_UPDATE: EMPLOYER_OR_ADMIN,
    Action.JOB_LIST_APPLICATIONS: EMPLOYER_OR_ADMIN,
    Action.DASHBOARD_COUNTS: EMPLOYER_OR_ADMIN,
    Action.APPLICATION_CREATE: STUDENT_ONLY,
    Action.APPLICATION_LIST_OWN: STUDENT_ONLY,
    Action.APPLICATION_CANCEL: STUDENT_ONLY,
    Action.APPLICATION_READ: ALL_ROLES,
    Action.APPLICATION_UPDATE_STATUS: EMPLOYER_OR_ADMIN,
    Action.APPLICATION_LIST_ALL: ADMIN_ONLY,
}

# Actions a caller may never perform on their own account
SELF_FORBIDDEN: FrozenSet[Action] = frozenset({Action.USER_CHANGE_ROLE, Action.USER_DELETE})

# Actions scoped to the job posting owner
OWNER_SCOPED: FrozenSet[Action] = frozenset({
    Action.JOB_READ,
    Action.JOB_UPDATE,
    Action.JOB_LIST_APPLICATIONS,
    Action.APPLICATION_UPDATE_STATUS,
})

# Actions scoped to the applicant
APPLICANT_SCOPED: FrozenSet[Action] = frozenset({
    Action.APPLICATION_CREATE,
    Action.APPLICATION_LIST_OWN,
    Action.APPLICATION_CANCEL,
})

SELF_ACTION_MESSAGES = {
    Action.USER_CHANGE_ROLE: "Cannot change your own role",
    Action.USER_DELETE: "Cannot delete your own account",
}


@dataclass(frozen=True)
class Resource:
    """What an action targets, reduced to the fields authorization needs.

    ``owner_id`` is the job posting owner (for postings and for applications
    via their posting), ``user_id`` the applicant. ``found=False`` marks a
    lookup that resolved nothing.
    """

    kind: str
    id: Optional[UUID] = None
    owner_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    found: bool = True

    @classmethod
    def missing(cls, kind: str, id: Optional[UUID] = None) -> "Resource":
        return cls(kind=kind, id=id, found=False)


@dataclass(frozen=True)
class Decision:
    """ALLOW, or DENY with a reason."""

    allowed: bool
    reason: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: ErrorKind, message: str) -> "Decision":
        return cls(allowed=False, reason=reason, message=message)

    def __bool__(self) -> bool:
        return self.allowed

    def to_error(self) -> PortalError:
        return error_for(self.reason, self.message)


def authorize(
    identity: Optional[CurrentUser],
    action: Action,
    resource: Optional[Resource] = None,
) -> Decision:
    """Decide whether ``identity`` may perform ``action`` on ``resource``."""
    if identity is None:
        return Decision.deny(ErrorKind.UNAUTHENTICATED, "Not authenticated")

    if action in SELF_FORBIDDEN and resource is not None and resource.id == identity.id:
        return Decision.deny(ErrorKind.CONFLICT, SELF_ACTION_MESSAGES[action])

    if identity.role not in ACTION_ROLES[action]:
        return Decision.deny(ErrorKind.UNAUTHORIZED, "Not authorized")

    if resource is not None and not resource.found:
        return Decision.deny(ErrorKind.NOT_FOUND, f"{resource.kind.capitalize()} not found")

    if identity.role == Role.ADMIN:
        return Decision.allow()

    if resource is None:
        return Decision.allow()

    if action in OWNER_SCOPED:
        if resource.owner_id != identity.id:
            return Decision.deny(
                ErrorKind.UNAUTHORIZED,
                f"You do not have permission to access this {resource.kind}",
            )
        return Decision.allow()

    if action in APPLICANT_SCOPED:
        if resource.user_id != identity.id:
            return Decision.deny(
                ErrorKind.UNAUTHORIZED,
                f"You do not have permission to access this {resource.kind}",
            )
        return Decision.allow()

    if action == Action.APPLICATION_READ:
        # Applicant sees their own record, employer sees applications to their jobs
        if identity.role == Role.STUDENT and resource.user_id == identity.id:
            return Decision.allow()
        if identity.role == Role.EMPLOYER and resource.owner_id == identity.id:
            return Decision.allow()
        return Decision.deny(
            ErrorKind.UNAUTHORIZED,
            "You do not have permission to view this application",
        )

    return Decision.allow()


def require(
    identity: Optional[CurrentUser],
    action: Action,
    resource: Optional[Resource] = None,
) -> CurrentUser:
    """Raise the matching ``PortalError`` unless ``authorize`` allows."""
    decision = authorize(identity, action, resource)
    if not decision:
        logger.info(
            "access_denied",
            action=action.value,
            user_id=str(identity.id) if identity else None,
            reason=decision.reason.value,
        )
        raise decision.to_error()
    return identity
