"""Database models."""

from db import Base

# Import all models so Alembic can detect them
from models.user import User
from models.organization import Organization
from models.profile import Profile, Role
from models.project import Project
from models.task import Task
from models.task_assignment import TaskAssignment
from models.service import Service
from models.invoice import Invoice
from models.invoice_item import InvoiceItem
from models.payment import Payment
from models.expense_category import ExpenseCategory
from models.vendor import Vendor
from models.expense import Expense
from models.drawing import Drawing
from models.document import Document
from models.project_proposal import ProjectProposal
from models.onedrive_connection import OneDriveConnection
from models.onedrive_file import OneDriveFile

__all__ = [
    "Base",
    "User",
    "Organization",
    "Profile",
    "Role",
    "Project",
    "Task",
    "TaskAssignment",
    "Service",
    "Invoice",
    "InvoiceItem",
    "Payment",
    "ExpenseCategory",
    "Vendor",
    "Expense",
    "Drawing",
    "Document",
    "ProjectProposal",
    "OneDriveConnection",
    "OneDriveFile",
]
