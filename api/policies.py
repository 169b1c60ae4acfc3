"""Row-level authorization rules, one predicate per (table, operation).

Every check has two parts. The row's organization must equal the caller's
resolved organization; this part is applied to every table and operation.
The per-table predicate below then decides on role or ownership.

Join tables (task_assignments, invoice_items, payments) carry no
organization of their own; callers pass the parent's organization.
"""

import enum
from typing import Any, Callable
from uuid import UUID

from fastapi import HTTPException, status

from api.tenancy import CallerContext
from models.profile import Role


class Operation(str, enum.Enum):
    """Table operation being authorized."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


Predicate = Callable[[CallerContext, Any], bool]


def anyone(caller: CallerContext, row: Any) -> bool:
    return True


def nobody(caller: CallerContext, row: Any) -> bool:
    return False


def roles(*allowed: Role) -> Predicate:
    """Caller holds one of the given roles."""

    def _check(caller: CallerContext, row: Any) -> bool:
        return caller.has_role(*allowed)

    return _check


def owned_by(attr: str) -> Predicate:
    """Row's profile reference in `attr` is the caller's profile."""

    def _check(caller: CallerContext, row: Any) -> bool:
        return getattr(row, attr, None) == caller.profile_id

    return _check


def any_of(*predicates: Predicate) -> Predicate:
    def _check(caller: CallerContext, row: Any) -> bool:
        return any(p(caller, row) for p in predicates)

    return _check


def is_self(caller: CallerContext, row: Any) -> bool:
    return row.user_id == caller.user_id


def not_self(caller: CallerContext, row: Any) -> bool:
    return row.user_id != caller.user_id


def all_of(*predicates: Predicate) -> Predicate:
    def _check(caller: CallerContext, row: Any) -> bool:
        return all(p(caller, row) for p in predicates)

    return _check


ADMIN = roles(Role.ADMIN)
ADMIN_OR_PM = roles(Role.ADMIN, Role.PM)

S, I, U, D = Operation.SELECT, Operation.INSERT, Operation.UPDATE, Operation.DELETE

POLICIES: dict[str, dict[Operation, Predicate]] = {
    "organizations": {S: anyone, I: nobody, U: ADMIN, D: ADMIN},
    "profiles": {S: anyone, I: ADMIN, U: any_of(is_self, ADMIN), D: all_of(ADMIN, not_self)},
    "projects": {S: anyone, I: anyone, U: ADMIN_OR_PM, D: ADMIN},
    "tasks": {
        S: anyone,
        I: anyone,
        U: any_of(owned_by("created_by"), ADMIN_OR_PM),
        D: any_of(owned_by("created_by"), ADMIN_OR_PM),
    },
    "task_assignments": {
        S: anyone,
        I: owned_by("user_id"),
        U: owned_by("user_id"),
        D: owned_by("user_id"),
    },
    "services": {S: anyone, I: anyone, U: ADMIN_OR_PM, D: ADMIN},
    "invoices": {S: anyone, I: anyone, U: ADMIN_OR_PM, D: ADMIN},
    "invoice_items": {S: anyone, I: anyone, U: anyone, D: anyone},
    "payments": {S: anyone, I: anyone, U: ADMIN, D: ADMIN},
    "expenses": {S: anyone, I: anyone, U: ADMIN_OR_PM, D: ADMIN},
    "expense_categories": {S: anyone, I: anyone, U: ADMIN_OR_PM, D: ADMIN},
    "vendors": {S: anyone, I: anyone, U: ADMIN_OR_PM, D: ADMIN},
    "project_proposals": {S: anyone, I: anyone, U: ADMIN_OR_PM, D: ADMIN},
    "drawings": {
        S: anyone,
        I: anyone,
        U: any_of(owned_by("uploaded_by"), ADMIN_OR_PM),
        D: ADMIN_OR_PM,
    },
    "documents": {
        S: anyone,
        I: anyone,
        U: any_of(owned_by("uploaded_by"), ADMIN_OR_PM),
        D: any_of(owned_by("uploaded_by"), ADMIN_OR_PM),
    },
    "onedrive_connections": {S: anyone, I: ADMIN_OR_PM, U: ADMIN_OR_PM, D: ADMIN},
    "onedrive_files": {S: anyone, I: anyone, U: anyone, D: ADMIN},
    "storage_objects": {S: anyone, I: anyone, U: anyone, D: anyone},
}

ENTITY_NAMES = {
    "organizations": "Organization",
    "profiles": "Profile",
    "projects": "Project",
    "tasks": "Task",
    "task_assignments": "Task assignment",
    "services": "Service",
    "invoices": "Invoice",
    "invoice_items": "Invoice item",
    "payments": "Payment",
    "expenses": "Expense",
    "expense_categories": "Expense category",
    "vendors": "Vendor",
    "project_proposals": "Proposal",
    "drawings": "Drawing",
    "documents": "Document",
    "onedrive_connections": "Connection",
    "onedrive_files": "File",
    "storage_objects": "Object",
}


def row_organization(table: str, row: Any) -> UUID | None:
    """Organization a row belongs to, for tables that carry it directly."""
    if table == "organizations":
        return row.id
    return getattr(row, "organization_id", None)


def object_organization(key: str) -> UUID | None:
    """Organization encoded as the first path segment of a storage key."""
    head = key.split("/", 1)[0]
    try:
        return UUID(head)
    except ValueError:
        return None


def is_allowed(
    table: str,
    operation: Operation,
    caller: CallerContext,
    row: Any,
    *,
    organization_id: UUID | None = None,
) -> bool:
    """
    Decide whether the caller may perform `operation` on `row`.

    Args:
        table: Table name the row belongs to
        operation: Operation being attempted
        caller: Resolved caller context
        row: Target row (for inserts, the row about to be written)
        organization_id: Organization of the parent row, for join tables

    Returns:
        True if allowed, False otherwise
    """
    org = organization_id if organization_id is not None else row_organization(table, row)
    if org is None or org != caller.organization_id:
        return False
    return POLICIES[table][operation](caller, row)


def authorize(
    table: str,
    operation: Operation,
    caller: CallerContext,
    row: Any,
    *,
    organization_id: UUID | None = None,
) -> None:
    """
    Raise if the caller may not perform `operation` on `row`.

    A row in another organization is reported exactly like a missing row
    (404), so callers cannot probe for ids across tenants. A visible row
    that fails the role/ownership predicate gives 403.

    Raises:
        HTTPException: 404 if not visible, 403 if not permitted
    """
    org = organization_id if organization_id is not None else row_organization(table, row)
    entity = ENTITY_NAMES.get(table, "Record")

    if org is None or org != caller.organization_id:
        if operation is Operation.INSERT:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Cannot create records for another organization",
            )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity} not found",
        )

    if not POLICIES[table][operation](caller, row):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )


def not_found(table: str) -> HTTPException:
    """The uniform error for a row that is missing or not visible."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{ENTITY_NAMES.get(table, 'Record')} not found",
    )
