"""Unit tests for the per-table authorization rules."""

from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi import HTTPException, status

from api.policies import Operation, authorize, is_allowed, object_organization
from api.tenancy import CallerContext


def make_caller(role="designer", organization_id=None):
    return CallerContext(
        user_id=uuid4(),
        profile_id=uuid4(),
        organization_id=organization_id or uuid4(),
        role=role,
    )


def test_row_in_other_organization_reads_as_not_found():
    """Test: Another organization's row is reported as missing, for every role."""
    for role in ("admin", "pm", "designer", "accountant"):
        caller = make_caller(role)
        row = SimpleNamespace(organization_id=uuid4())
        with pytest.raises(HTTPException) as exc_info:
            authorize("projects", Operation.SELECT, caller, row)
        assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND
        assert exc_info.value.detail == "Project not found"


def test_insert_into_other_organization_is_forbidden():
    caller = make_caller("admin")
    row = SimpleNamespace(organization_id=uuid4())
    with pytest.raises(HTTPException) as exc_info:
        authorize("expenses", Operation.INSERT, caller, row)
    assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN


def test_role_predicates_for_projects():
    admin = make_caller("admin")
    pm = make_caller("pm", admin.organization_id)
    designer = make_caller("designer", admin.organization_id)
    row = SimpleNamespace(organization_id=admin.organization_id)

    assert is_allowed("projects", Operation.UPDATE, pm, row)
    assert not is_allowed("projects", Operation.UPDATE, designer, row)
    assert is_allowed("projects", Operation.DELETE, admin, row)
    assert not is_allowed("projects", Operation.DELETE, pm, row)


def test_task_creator_may_update_own_task():
    designer = make_caller("designer")
    own = SimpleNamespace(organization_id=designer.organization_id, created_by=designer.profile_id)
    other = SimpleNamespace(organization_id=designer.organization_id, created_by=uuid4())

    assert is_allowed("tasks", Operation.UPDATE, designer, own)
    assert not is_allowed("tasks", Operation.UPDATE, designer, other)


def test_join_table_uses_parent_organization():
    """Test: Payments carry no organization; the invoice's organization decides."""
    caller = make_caller("admin")
    payment = SimpleNamespace(invoice_id=uuid4())

    assert is_allowed(
        "payments", Operation.DELETE, caller, payment, organization_id=caller.organization_id
    )
    assert not is_allowed("payments", Operation.DELETE, caller, payment, organization_id=uuid4())
    assert not is_allowed("payments", Operation.DELETE, caller, payment)


def test_admin_cannot_delete_own_profile():
    admin = make_caller("admin")
    own = SimpleNamespace(organization_id=admin.organization_id, user_id=admin.user_id)
    with pytest.raises(HTTPException) as exc_info:
        authorize("profiles", Operation.DELETE, admin, own)
    assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN


def test_object_organization_reads_first_key_segment():
    organization_id = uuid4()
    assert object_organization(f"{organization_id}/{uuid4()}/1_plan.pdf") == organization_id
    assert object_organization("not-a-uuid/plan.pdf") is None
