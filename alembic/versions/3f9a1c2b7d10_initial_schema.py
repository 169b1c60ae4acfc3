"""initial schema: tenancy, projects, billing, expenses, files and onedrive

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-19 09:12:44.102311

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def _org_fk() -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(['organization_id'], ['organizations.id'], ondelete='CASCADE')


def _project_fk() -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='CASCADE')


def upgrade() -> None:
    """Create every table of the application."""

    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=True),
        sa.Column('last_name', sa.String(length=255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('organizations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=True),
        sa.Column('last_name', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=50), nullable=False, server_default='designer'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        _org_fk(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_user_id', 'profiles', ['user_id'], unique=True)
    op.create_index('ix_profiles_organization_id', 'profiles', ['organization_id'], unique=False)

    op.create_table('projects',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('project_type', sa.String(length=50), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='planning'),
        sa.Column('client_name', sa.String(length=255), nullable=False),
        sa.Column('client_email', sa.String(length=255), nullable=True),
        sa.Column('client_phone', sa.String(length=50), nullable=True),
        sa.Column('project_address', sa.Text(), nullable=True),
        sa.Column('estimated_budget', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('actual_budget', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('estimated_completion_date', sa.Date(), nullable=True),
        sa.Column('actual_completion_date', sa.Date(), nullable=True),
        sa.Column('project_manager_id', sa.Uuid(), nullable=True),
        sa.Column('created_by', sa.Uuid(), nullable=False),
        *_timestamps(),
        _org_fk(),
        sa.ForeignKeyConstraint(['project_manager_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_projects_organization_id', 'projects', ['organization_id'], unique=False)
    op.create_index('ix_projects_status', 'projects', ['status'], unique=False)
    op.create_index('ix_projects_created_by', 'projects', ['created_by'], unique=False)
    # Lookup used by the OneDrive import to find an existing project
    op.create_index(
        'ix_projects_org_client_name',
        'projects',
        ['organization_id', 'client_name', 'name'],
        unique=False,
    )

    op.create_table('tasks',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='pending'),
        sa.Column('estimated_hours', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('actual_hours', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('estimated_cost', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('actual_cost', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('created_by', sa.Uuid(), nullable=False),
        *_timestamps(),
        _project_fk(),
        _org_fk(),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id']),
        sa.CheckConstraint("status IN ('pending', 'in_progress', 'completed')", name='ck_tasks_status'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tasks_project_id', 'tasks', ['project_id'], unique=False)
    op.create_index('ix_tasks_organization_id', 'tasks', ['organization_id'], unique=False)

    op.create_table('task_assignments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('task_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('hours_spent', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('cost_incurred', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('date_worked', sa.Date(), nullable=False, server_default=sa.func.current_date()),
        *_timestamps(),
        sa.ForeignKeyConstraint(['task_id'], ['tasks.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id']),
        sa.UniqueConstraint('task_id', 'user_id', 'date_worked', name='uq_task_assignment_day'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_task_assignments_task_id', 'task_assignments', ['task_id'], unique=False)
    op.create_index('ix_task_assignments_user_id', 'task_assignments', ['user_id'], unique=False)

    op.create_table('services',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('unit_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('unit', sa.String(length=50), nullable=False, server_default='hour'),
        sa.Column('payment_status', sa.String(length=50), nullable=True, server_default='unpaid'),
        *_timestamps(),
        _org_fk(),
        _project_fk(),
        sa.CheckConstraint(
            "payment_status IN ('paid', 'to_be_paid', 'unpaid')",
            name='ck_services_payment_status',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_services_organization_id', 'services', ['organization_id'], unique=False)
    op.create_index('ix_services_project_id', 'services', ['project_id'], unique=False)

    op.create_table('invoices',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('invoice_number', sa.String(length=100), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('paid_amount', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('balance_due', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=50), nullable=False, server_default='draft'),
        sa.Column('issue_date', sa.Date(), nullable=False, server_default=sa.func.current_date()),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        _project_fk(),
        _org_fk(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_invoices_project_id', 'invoices', ['project_id'], unique=False)
    op.create_index('ix_invoices_organization_id', 'invoices', ['organization_id'], unique=False)

    op.create_table('invoice_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('invoice_id', sa.Uuid(), nullable=False),
        sa.Column('service_id', sa.Uuid(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('quantity', sa.Numeric(precision=10, scale=2), nullable=False, server_default='1'),
        sa.Column('unit_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('total_price', sa.Numeric(precision=10, scale=2), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['service_id'], ['services.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_invoice_items_invoice_id', 'invoice_items', ['invoice_id'], unique=False)
    op.create_index('ix_invoice_items_service_id', 'invoice_items', ['service_id'], unique=False)

    op.create_table('payments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('invoice_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False, server_default=sa.func.current_date()),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payments_invoice_id', 'payments', ['invoice_id'], unique=False)

    op.create_table('expense_categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        _org_fk(),
        sa.UniqueConstraint('organization_id', 'name', name='uq_expense_category_org_name'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_expense_categories_organization_id', 'expense_categories', ['organization_id'], unique=False
    )

    op.create_table('vendors',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('default_category_id', sa.Uuid(), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        *_timestamps(),
        _org_fk(),
        sa.ForeignKeyConstraint(['default_category_id'], ['expense_categories.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('organization_id', 'name', name='uq_vendor_org_name'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_vendors_organization_id', 'vendors', ['organization_id'], unique=False)

    op.create_table('expenses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('vendor_id', sa.Uuid(), nullable=True),
        sa.Column('expense_date', sa.Date(), nullable=False, server_default=sa.func.current_date()),
        sa.Column('category', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('receipt_url', sa.Text(), nullable=True),
        sa.Column('tax_rate', sa.Numeric(precision=6, scale=3), nullable=True, server_default='0'),
        sa.Column('tax_amount', sa.Numeric(precision=10, scale=2), nullable=True, server_default='0'),
        sa.Column('manual_tax_override', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        _project_fk(),
        _org_fk(),
        sa.ForeignKeyConstraint(['vendor_id'], ['vendors.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_expenses_project_id', 'expenses', ['project_id'], unique=False)
    op.create_index('ix_expenses_organization_id', 'expenses', ['organization_id'], unique=False)
    op.create_index('ix_expenses_vendor_id', 'expenses', ['vendor_id'], unique=False)

    for table, extra in (
        ('drawings', [sa.Column('custom_category', sa.String(length=100), nullable=True)]),
        ('documents', [sa.Column('description', sa.Text(), nullable=True)]),
    ):
        op.create_table(table,
            sa.Column('id', sa.Uuid(), nullable=False),
            sa.Column('project_id', sa.Uuid(), nullable=False),
            sa.Column('organization_id', sa.Uuid(), nullable=False),
            sa.Column('title', sa.String(length=255), nullable=False),
            sa.Column('category', sa.String(length=100), nullable=False),
            *extra,
            sa.Column('file_name', sa.String(length=255), nullable=False),
            sa.Column('file_url', sa.Text(), nullable=False),
            sa.Column('file_type', sa.String(length=255), nullable=False),
            sa.Column('file_size', sa.Integer(), nullable=True),
            sa.Column('uploaded_by', sa.Uuid(), nullable=False),
            *_timestamps(),
            _project_fk(),
            _org_fk(),
            sa.ForeignKeyConstraint(['uploaded_by'], ['profiles.id']),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index(f'ix_{table}_project_id', table, ['project_id'], unique=False)
        op.create_index(f'ix_{table}_organization_id', table, ['organization_id'], unique=False)

    op.create_table('project_proposals',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False, server_default='PROJECT PROPOSAL'),
        sa.Column('work_summary', sa.Text(), nullable=True),
        sa.Column('scope_of_work', sa.JSON().with_variant(postgresql.JSONB(), 'postgresql'), nullable=True),
        sa.Column('project_lead', sa.String(length=255), nullable=True),
        sa.Column('site_engineer', sa.String(length=255), nullable=True),
        sa.Column('supervisor', sa.String(length=255), nullable=True),
        sa.Column('additional_notes', sa.Text(), nullable=True),
        sa.Column('proposal_file_url', sa.Text(), nullable=True),
        sa.Column('proposal_file_name', sa.String(length=255), nullable=True),
        sa.Column('approved_by', sa.String(length=255), nullable=True),
        sa.Column('approval_date', sa.Date(), nullable=True),
        sa.Column('approval_status', sa.String(length=50), nullable=False, server_default='pending'),
        *_timestamps(),
        _project_fk(),
        _org_fk(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_project_proposals_project_id', 'project_proposals', ['project_id'], unique=False)
    op.create_index(
        'ix_project_proposals_organization_id', 'project_proposals', ['organization_id'], unique=False
    )

    op.create_table('onedrive_connections',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('access_token', sa.Text(), nullable=True),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('token_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('folder_path', sa.String(length=1024), nullable=True),
        sa.Column('sync_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_sync_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        _org_fk(),
        sa.ForeignKeyConstraint(['created_by'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_onedrive_connections_organization_id', 'onedrive_connections', ['organization_id'], unique=True
    )

    op.create_table('onedrive_files',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=False),
        sa.Column('project_id', sa.Uuid(), nullable=True),
        sa.Column('onedrive_file_id', sa.String(length=255), nullable=False),
        sa.Column('file_name', sa.String(length=1024), nullable=False),
        sa.Column('file_path', sa.Text(), nullable=False),
        sa.Column('web_url', sa.Text(), nullable=True),
        sa.Column('download_url', sa.Text(), nullable=True),
        sa.Column('file_size', sa.BigInteger(), nullable=True),
        sa.Column('modified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('parsed_client_name', sa.String(length=255), nullable=True),
        sa.Column('parsed_project_name', sa.String(length=255), nullable=True),
        sa.Column('file_type', sa.String(length=100), nullable=True),
        sa.Column('sync_status', sa.String(length=50), nullable=True, server_default='synced'),
        *_timestamps(),
        _org_fk(),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('organization_id', 'onedrive_file_id', name='uq_onedrive_file_org_remote_id'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_onedrive_files_organization_id', 'onedrive_files', ['organization_id'], unique=False)
    op.create_index('ix_onedrive_files_project_id', 'onedrive_files', ['project_id'], unique=False)
    op.create_index('ix_onedrive_files_onedrive_file_id', 'onedrive_files', ['onedrive_file_id'], unique=False)


def downgrade() -> None:
    """Drop every table, children first."""
    for table in (
        'onedrive_files',
        'onedrive_connections',
        'project_proposals',
        'documents',
        'drawings',
        'expenses',
        'vendors',
        'expense_categories',
        'payments',
        'invoice_items',
        'invoices',
        'services',
        'task_assignments',
        'tasks',
        'projects',
        'profiles',
        'organizations',
        'users',
    ):
        op.drop_table(table)
