from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_user, get_db, require_admin
from app.models.user import User
from app.schemas.booking import BookingOut
from app.schemas.payment import PaymentEnvelope, PaymentList, PaymentOut, PaymentProcess, PaymentResult
from app.services import payments as payment_service

router = APIRouter(prefix="/payments", tags=["Payments"])


def payment_list(payments) -> dict:
    return {"payments": [PaymentOut.model_validate(p) for p in payments], "count": len(payments)}


# ---------------------------------------------------------------------
# ADMIN: ALL PAYMENTS
# ---------------------------------------------------------------------
@router.get("/admin", response_model=PaymentList)
def admin_payments(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return payment_list(payment_service.list_all_payments(db))


# ---------------------------------------------------------------------
# USER: MY PAYMENTS
# ---------------------------------------------------------------------
@router.get("/my-payments", response_model=PaymentList)
def my_payments(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return payment_list(payment_service.list_user_payments(db, user))


# ---------------------------------------------------------------------
# PROCESS PAYMENT (simulated, always completes)
# ---------------------------------------------------------------------
@router.post("/process", response_model=PaymentResult, status_code=201)
def process_payment(data: PaymentProcess, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    payment, booking = payment_service.process_payment(
        db,
        booking_id=data.booking_id,
        method=data.payment_method,
        transaction_id=data.transaction_id,
        actor=user,
    )
    return {
        "payment": PaymentOut.model_validate(payment),
        "booking": BookingOut.model_validate(booking),
    }


# ---------------------------------------------------------------------
# SINGLE PAYMENT
# ---------------------------------------------------------------------
@router.get("/{payment_id}", response_model=PaymentEnvelope)
def get_payment(payment_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    payment = payment_service.get_payment(db, payment_id, user)
    return {"payment": PaymentOut.model_validate(payment)}
