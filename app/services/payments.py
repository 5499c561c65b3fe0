from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from app.core.logging_config import get_logger
from app.models.booking import Booking
from app.models.enums import BookingStatus, NotificationType, PaymentMethod, PaymentStatus, RelatedModel
from app.models.payment import Payment
from app.models.user import User
from app.services.bookings import can_access, validate_transition
from app.services.notifications import NotificationEvent, dispatch

logger = get_logger()


def completed_payment_for(db: Session, booking_id: int):
    return db.query(Payment).filter(
        Payment.booking_id == booking_id,
        Payment.status == PaymentStatus.COMPLETED,
    ).first()


def process_payment(
    db: Session,
    booking_id: int,
    method: PaymentMethod,
    transaction_id: str,
    actor: User,
):
    """Record a completed (simulated) payment and confirm the booking.

    Payment and booking status are committed together. A second completed
    payment for the same booking is refused both here and by the partial
    unique index on payments.
    """
    booking = (
        db.query(Booking)
        .options(joinedload(Booking.hall))
        .filter(Booking.id == booking_id)
        .first()
    )
    if not booking:
        raise NotFoundError(f"No booking with id: {booking_id}")

    if not can_access(booking, actor):
        raise ForbiddenError("Not authorized to make payment for this booking")

    if completed_payment_for(db, booking.id):
        raise ConflictError("Payment already completed for this booking")

    # An admin may have confirmed the booking before it was paid
    if booking.status != BookingStatus.CONFIRMED:
        validate_transition(booking.status, BookingStatus.CONFIRMED)

    payment = Payment(
        booking_id=booking.id,
        amount=booking.total_amount,
        payment_method=method,
        transaction_id=transaction_id,
        status=PaymentStatus.COMPLETED,
    )
    booking.status = BookingStatus.CONFIRMED
    db.add(payment)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.bind(log_type="payment").warning(
            f"Duplicate Payment Refused | Booking={booking_id} | Txn={transaction_id}"
        )
        raise ConflictError("Payment already completed for this booking")

    db.refresh(payment)
    db.refresh(booking)

    logger.bind(log_type="payment").info(
        f"Payment Completed | Payment={payment.id} | Booking={booking.id} | "
        f"Amount={payment.amount} | Method={method.value} | Txn={transaction_id}"
    )

    hall_name = booking.hall.name
    dispatch(db, NotificationEvent(
        type=NotificationType.PAYMENT,
        owner_id=booking.user_id,
        owner_title="Payment Successful",
        owner_message=f"Your payment for booking at {hall_name} has been processed successfully.",
        admin_title="New Payment",
        admin_message=f"A payment has been received for booking at {hall_name}.",
        related_model=RelatedModel.PAYMENT,
        related_id=payment.id,
    ))

    return payment, booking


# ---------------------------------------------------------------------
# READS
# ---------------------------------------------------------------------
def _payment_query(db: Session):
    return db.query(Payment).options(
        joinedload(Payment.booking).joinedload(Booking.hall),
        joinedload(Payment.booking).joinedload(Booking.user),
    )


def get_payment(db: Session, payment_id: int, actor: User) -> Payment:
    payment = _payment_query(db).filter(Payment.id == payment_id).first()
    if not payment:
        raise NotFoundError(f"No payment with id: {payment_id}")

    if not can_access(payment.booking, actor):
        raise ForbiddenError("Not authorized to access this payment")

    return payment


def list_user_payments(db: Session, user: User):
    return (
        _payment_query(db)
        .join(Booking, Payment.booking_id == Booking.id)
        .filter(Booking.user_id == user.id)
        .order_by(Payment.paid_at.desc(), Payment.id.desc())
        .all()
    )


def list_all_payments(db: Session):
    return _payment_query(db).order_by(Payment.paid_at.desc(), Payment.id.desc()).all()
