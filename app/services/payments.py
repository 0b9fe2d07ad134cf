# app/services/payments.py
# Stored payment methods. At most one default per user.
#
# Setting a default clears every other default for the user first, inside
# the same transaction, so a reader never sees two defaults after commit.

import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models.payment import PaymentMethod

logger = logging.getLogger("studybuddy.payments")


def mask_account_number(account_number: str) -> str:
    """"03001234567" → "****4567". Short numbers are fully masked."""
    if not account_number:
        return ""
    if len(account_number) <= 4:
        return "*" * len(account_number)
    return "****" + account_number[-4:]


def _clear_defaults(db: Session, user_id: int) -> None:
    current = db.query(PaymentMethod).filter(
        PaymentMethod.user_id == user_id,
        PaymentMethod.is_default == True,
    ).all()
    for method in current:
        method.is_default = False
    db.flush()


def list_payment_methods(db: Session, user_id: int) -> List[PaymentMethod]:
    return (
        db.query(PaymentMethod)
        .filter(PaymentMethod.user_id == user_id)
        .order_by(PaymentMethod.is_default.desc(), PaymentMethod.id)
        .all()
    )


def create_payment_method(
    db: Session,
    user_id: int,
    method_type: str,
    account_number: str,
    is_default: bool = False,
) -> PaymentMethod:
    if not method_type or not account_number:
        raise ValidationError("Payment method type and account number are required.")

    if is_default:
        _clear_defaults(db, user_id)

    method = PaymentMethod(
        user_id=user_id,
        method_type=method_type,
        account_number=account_number,
        is_default=is_default,
    )
    db.add(method)
    db.flush()

    logger.info(f"Payment method {method.id} added for user {user_id} (default={is_default})")
    return method


def set_default(db: Session, user_id: int, payment_method_id: int) -> PaymentMethod:
    method = db.query(PaymentMethod).filter(PaymentMethod.id == payment_method_id).first()
    if not method:
        raise NotFound("Payment method not found.")
    if method.user_id != user_id:
        raise Forbidden("This payment method belongs to another user.")

    _clear_defaults(db, user_id)
    method.is_default = True
    db.flush()

    logger.info(f"Payment method {method.id} is now default for user {user_id}")
    return method
