"""ORM models. Importing this package registers every table on ``Base.metadata``."""

from database.models.users import User, UserRole
from database.models.companies import Company
from database.models.payments import ManualPayment, PaymentStatus
from database.models.jobs import Job, JobStatus, EmploymentType
from database.models.applications import Application, ApplicationStatus
from database.models.notifications import Notification, NotificationCategory

__all__ = [
    "User",
    "UserRole",
    "Company",
    "ManualPayment",
    "PaymentStatus",
    "Job",
    "JobStatus",
    "EmploymentType",
    "Application",
    "ApplicationStatus",
    "Notification",
    "NotificationCategory",
]
