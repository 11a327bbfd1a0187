"""
API Services Layer.

Workflow operations for the job board. Every function takes the request's
``AsyncSession`` first and commits at most once.
"""

from api.services.notifications import (
    Notifier,
    list_notifications,
    count_unread,
    mark_as_read,
    mark_all_as_read,
)

from api.services.companies import (
    register_company,
    get_company_by_employer,
    update_company,
    set_company_logo,
    set_payment_verified,
)

from api.services.payments import (
    submit_payment,
    review_payment,
    get_payment,
    get_latest_payment,
    list_payments_by_employer,
    list_pending_payments,
)

from api.services.jobs import (
    create_job,
    approve_job,
    reject_job,
    close_job,
    update_job,
    search_jobs,
    get_job,
    get_job_detail,
    list_jobs_by_company,
    list_pending_jobs,
)

from api.services.applications import (
    apply_to_job,
    list_applications_by_applicant,
    list_applications_by_job,
    get_application,
    update_application_status,
)

from api.services.users import (
    register_user,
    authenticate_user,
    update_profile,
    set_resume,
    list_users_by_role,
    set_user_enabled,
    get_platform_stats,
)

__all__ = [
    # Notifications
    "Notifier",
    "list_notifications",
    "count_unread",
    "mark_as_read",
    "mark_all_as_read",
    # Companies
    "register_company",
    "get_company_by_employer",
    "update_company",
    "set_company_logo",
    "set_payment_verified",
    # Payments
    "submit_payment",
    "review_payment",
    "get_payment",
    "get_latest_payment",
    "list_payments_by_employer",
    "list_pending_payments",
    # Jobs
    "create_job",
    "approve_job",
    "reject_job",
    "close_job",
    "update_job",
    "search_jobs",
    "get_job",
    "get_job_detail",
    "list_jobs_by_company",
    "list_pending_jobs",
    # Applications
    "apply_to_job",
    "list_applications_by_applicant",
    "list_applications_by_job",
    "get_application",
    "update_application_status",
    # Users
    "register_user",
    "authenticate_user",
    "update_profile",
    "set_resume",
    "list_users_by_role",
    "set_user_enabled",
    "get_platform_stats",
]
