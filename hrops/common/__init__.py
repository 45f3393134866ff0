"""Common module — shared utilities for HR Ops."""

from hrops.common.audit import AuditTrail, create_audit_entry
from hrops.common.constants import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    Action,
    AttendanceStatus,
    CustomRole,
    LeaveStatus,
    PayrollStatus,
    PredefinedRole,
    Resource,
    Role,
    parse_role,
)
from hrops.common.exceptions import (
    AlreadyProcessedError,
    AppException,
    ConflictError,
    ForbiddenException,
    InvalidInputException,
    InvalidIntervalException,
    NotFoundException,
    OverlapConflictError,
    UnauthenticatedException,
    register_exception_handlers,
)
from hrops.common.pagination import (
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
    paginate,
)

__all__ = [
    # Audit
    "AuditTrail",
    "create_audit_entry",
    # Constants / Enums
    "Action",
    "AttendanceStatus",
    "CustomRole",
    "LeaveStatus",
    "PayrollStatus",
    "PredefinedRole",
    "Resource",
    "Role",
    "parse_role",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    # Exceptions
    "AlreadyProcessedError",
    "AppException",
    "ConflictError",
    "ForbiddenException",
    "InvalidInputException",
    "InvalidIntervalException",
    "NotFoundException",
    "OverlapConflictError",
    "UnauthenticatedException",
    "register_exception_handlers",
    # Pagination
    "PaginatedResponse",
    "PaginationMeta",
    "PaginationParams",
    "paginate",
]
