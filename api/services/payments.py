"""
Payment workflow.

Employers upload a proof of payment; an admin verifies or rejects it once.
Verification flips the employer's company ``payment_verified`` flag in the
same transaction. The flag is monotonic: rejecting a later submission never
clears it.

    pending_review -> verified | rejected
"""

from datetime import datetime, timezone
from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import AlreadyProcessedError, NotFoundError, ValidationError, is_blank
from core.middleware.authorization import ensure_role
from database.models.notifications import NotificationCategory
from database.models.payments import ManualPayment, PaymentStatus
from database.models.users import User, UserRole
from api.services.companies import get_company_by_employer, set_payment_verified
from api.services.notifications import Notifier
from api.services.transitions import compare_and_set

logger = logging.getLogger(__name__)

ADMIN_PAYMENTS_LINK = "/admin/payments"
PAYMENT_STATUS_LINK = "/payments/status"


async def submit_payment(
    session: AsyncSession,
    employer: User,
    file_path: Optional[str],
    reference_number: Optional[str],
    notifier: Optional[Notifier] = None,
) -> ManualPayment:
    """
    Record a proof-of-payment upload and tell every admin about it.

    Resubmission is always allowed; each upload is a new record.

    Args:
        session: Database session
        employer: Uploading employer
        file_path: Storage reference of the proof document
        reference_number: Bank/transfer reference supplied by the employer

    Returns:
        The new pending payment
    """
    ensure_role(employer, UserRole.EMPLOYER)
    if is_blank(file_path):
        raise ValidationError("Payment proof file is required", field="file")
    if is_blank(reference_number):
        raise ValidationError("Reference number is required", field="reference_number")

    notifier = notifier or Notifier(session)
    employer_id, employer_email = employer.id, employer.email

    payment = ManualPayment(
        employer_id=employer_id,
        file_path=file_path,
        reference_number=reference_number.strip(),
        status=PaymentStatus.PENDING_REVIEW,
    )
    session.add(payment)
    await session.flush()

    admins = await notifier.broadcast(
        UserRole.ADMIN,
        "New Payment Proof",
        f"Employer {employer_email} uploaded payment proof for verification.",
        NotificationCategory.NEW_PAYMENT,
        ADMIN_PAYMENTS_LINK,
    )
    await session.commit()
    await notifier.deliver()

    logger.info(
        f"Payment {payment.id} submitted by employer {employer_id}; {admins} admin(s) notified"
    )
    return payment


async def review_payment(
    session: AsyncSession,
    payment_id: int,
    admin: User,
    status: Optional[PaymentStatus],
    admin_notes: Optional[str] = None,
    notifier: Optional[Notifier] = None,
) -> ManualPayment:
    """
    Verify or reject a pending payment.

    Raises:
        NotFoundError: unknown payment, or verifying for an employer with
            no company
        AlreadyProcessedError: payment is no longer pending review
        ValidationError: missing decision, or rejection without notes
    """
    ensure_role(admin, UserRole.ADMIN)
    payment = await get_payment(session, payment_id)

    if payment.status != PaymentStatus.PENDING_REVIEW:
        raise AlreadyProcessedError("Payment", payment.status)
    if status is not None:
        status = PaymentStatus(status)
    if status is None or status == PaymentStatus.PENDING_REVIEW:
        raise ValidationError("Payment status is required", field="status")
    if status == PaymentStatus.REJECTED and is_blank(admin_notes):
        raise ValidationError(
            "Rejection reason is required when rejecting a payment", field="admin_notes"
        )

    notifier = notifier or Notifier(session)
    admin_id = admin.id
    employer_id = payment.employer_id

    company = None
    if status == PaymentStatus.VERIFIED:
        employer = await session.get(User, employer_id)
        if employer is None:
            raise NotFoundError("User", employer_id)
        company = await get_company_by_employer(session, employer)

    await compare_and_set(
        session,
        ManualPayment,
        "Payment",
        payment_id,
        PaymentStatus.PENDING_REVIEW,
        status=status,
        admin_notes=admin_notes,
        verified_by_id=admin_id,
        verified_at=datetime.now(timezone.utc),
    )

    if company is not None:
        await set_payment_verified(session, company.id, True)
        notifier.notify(
            employer_id,
            "Payment Verified",
            "Your payment proof has been verified. You can now post jobs.",
            NotificationCategory.PAYMENT_VERIFIED,
            PAYMENT_STATUS_LINK,
        )
    else:
        notifier.notify(
            employer_id,
            "Payment Rejected",
            f"Your payment proof has been rejected. {admin_notes.strip()}",
            NotificationCategory.PAYMENT_REJECTED,
            PAYMENT_STATUS_LINK,
        )

    await session.commit()
    await session.refresh(payment)
    await notifier.deliver()

    logger.info(f"Payment {payment_id} reviewed by admin {admin_id}: {status.value}")
    return payment


async def get_payment(session: AsyncSession, payment_id: int) -> ManualPayment:
    payment = await session.get(ManualPayment, payment_id)
    if payment is None:
        raise NotFoundError("Payment", payment_id)
    return payment


async def get_latest_payment(session: AsyncSession, employer: User) -> Optional[ManualPayment]:
    """The employer's most recent submission, or None."""
    result = await session.execute(
        select(ManualPayment)
        .where(ManualPayment.employer_id == employer.id)
        .order_by(ManualPayment.uploaded_at.desc(), ManualPayment.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_payments_by_employer(session: AsyncSession, employer: User) -> List[ManualPayment]:
    result = await session.execute(
        select(ManualPayment)
        .where(ManualPayment.employer_id == employer.id)
        .order_by(ManualPayment.uploaded_at.desc(), ManualPayment.id.desc())
    )
    return list(result.scalars().all())


async def list_pending_payments(session: AsyncSession) -> List[ManualPayment]:
    """Review queue, oldest first."""
    result = await session.execute(
        select(ManualPayment)
        .where(ManualPayment.status == PaymentStatus.PENDING_REVIEW)
        .order_by(ManualPayment.uploaded_at.asc(), ManualPayment.id.asc())
    )
    return list(result.scalars().all())
