# app/schemas/payment.py

from datetime import datetime

from pydantic import BaseModel, field_validator

from app.services.payments import mask_account_number


class PaymentMethodCreate(BaseModel):
    method_type: str       # jazzcash | easypaisa | bank | card
    account_number: str
    is_default: bool = False

    @field_validator("method_type", "account_number")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be empty")
        return v


class PaymentMethodResponse(BaseModel):
    id: int
    method_type: str
    account_number: str    # masked: ****1234
    is_default: bool
    created_at: datetime

    @classmethod
    def from_model(cls, method) -> "PaymentMethodResponse":
        return cls(
            id=method.id,
            method_type=method.method_type,
            account_number=mask_account_number(method.account_number),
            is_default=method.is_default,
            created_at=method.created_at,
        )
