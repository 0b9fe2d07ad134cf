# app/api/v1/endpoints/payment_methods.py
# Stored payment methods for the logged-in user
#
# GET  /payment-methods/               → list (default first)
# POST /payment-methods/               → add (optionally as default)
# PUT  /payment-methods/{id}/default   → make default, clearing the old one
#
# Account numbers are masked in every response.

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import app.db.base  # noqa: F401
from app.core.dependencies import require_login
from app.db.session import get_db
from app.models.user import User
from app.schemas.payment import PaymentMethodCreate, PaymentMethodResponse
from app.services import payments

router = APIRouter()


@router.get("/", response_model=List[PaymentMethodResponse], summary="List own payment methods")
def list_methods(
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    return [PaymentMethodResponse.from_model(m) for m in payments.list_payment_methods(db, current_user.id)]


@router.post("/", response_model=PaymentMethodResponse, status_code=201, summary="Add a payment method")
def create_method(
    payload: PaymentMethodCreate,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    method = payments.create_payment_method(
        db,
        user_id=current_user.id,
        method_type=payload.method_type,
        account_number=payload.account_number,
        is_default=payload.is_default,
    )
    db.commit()
    return PaymentMethodResponse.from_model(method)


@router.put("/{payment_method_id}/default", response_model=PaymentMethodResponse, summary="Set default payment method")
def set_default_method(
    payment_method_id: int,
    current_user: User = Depends(require_login),
    db: Session = Depends(get_db),
):
    method = payments.set_default(db, current_user.id, payment_method_id)
    db.commit()
    return PaymentMethodResponse.from_model(method)
