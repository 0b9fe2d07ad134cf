# app/models/payment.py
# Stored payout / payment accounts (e.g. JazzCash, EasyPaisa, bank account)
# Payment processing itself is external -- only account details live here.

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.base_class import Base


class PaymentMethod(Base):
    """
    At most one row per user has is_default=True.
    Enforced by app/services/payments.py, which clears other defaults first.
    """
    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    method_type = Column(String(50), nullable=False)        # jazzcash | easypaisa | bank | card
    account_number = Column(String(64), nullable=False)     # Masked in responses: ****1234
    is_default = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    user = relationship("User", back_populates="payment_methods")

    def __repr__(self) -> str:
        return f"<PaymentMethod user={self.user_id} type={self.method_type} default={self.is_default}>"
