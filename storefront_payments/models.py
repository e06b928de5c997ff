import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime, JSON
from storefront_payments.database import Base


class OrderStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    FAILED = "failed"


def _new_order_id():
    return str(uuid.uuid4())


def _utcnow():
    return datetime.now(timezone.utc)


class OrderIntent(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=_new_order_id)
    user_id = Column(String, index=True, nullable=False)
    order_items = Column(JSON, nullable=False)         # validated line items
    total_cents = Column(Integer, nullable=False)
    currency = Column(String, nullable=False)
    shipping_address = Column(JSON, nullable=False)
    status = Column(String, nullable=False, default=OrderStatus.PENDING)
    payment_method = Column(String, default="online")
    payment_reference = Column(String, nullable=True)  # gateway payment id
    coupon_code = Column(String, nullable=True)
    coupon_discount_cents = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "items": self.order_items,
            "totalCents": self.total_cents,
            "currency": self.currency,
            "shippingAddress": self.shipping_address,
            "status": self.status,
            "paymentMethod": self.payment_method,
            "paymentReference": self.payment_reference,
            "couponCode": self.coupon_code,
            "couponDiscountCents": self.coupon_discount_cents,
        }
