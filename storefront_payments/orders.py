"""Order intent store operations.

The payment flow only ever moves an order from ``pending`` to
``confirmed``; line items and totals are written once, at creation.
"""
import logging

from sqlalchemy.orm import Session

from storefront_payments.errors import Forbidden, InvalidArgument, OrderNotFound, OrderStateError
from storefront_payments.models import OrderIntent, OrderStatus
from storefront_payments.schemas import OrderIntentRequest

logger = logging.getLogger(__name__)


def create_order_intent(db: Session, user_id: str, request: OrderIntentRequest, currency: str) -> OrderIntent:
    total = request.total_cents()
    if total <= 0:
        raise InvalidArgument("Order total must be positive")

    order = OrderIntent(
        user_id=user_id,
        order_items=[item.model_dump() for item in request.items],
        total_cents=total,
        currency=currency,
        shipping_address=request.shipping_address.model_dump(),
        status=OrderStatus.PENDING,
        payment_method="online",
        coupon_code=request.coupon_code,
        coupon_discount_cents=request.coupon_discount_cents,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("Order intent %s created for user %s (%s %s)", order.id, user_id, total, currency)
    return order


def get_order_intent(db: Session, order_id: str) -> OrderIntent:
    order = db.get(OrderIntent, order_id)
    if order is None:
        raise OrderNotFound()
    return order


def confirm_order_intent(db: Session, order_id: str, payment_id: str, user_id: str = None) -> OrderIntent:
    """Mark a pending order as paid. Confirming a confirmed order is a no-op.

    When `user_id` is given the order must belong to that user.
    """
    order = get_order_intent(db, order_id)
    if user_id is not None and order.user_id != user_id:
        raise Forbidden()

    if order.status == OrderStatus.CONFIRMED:
        if order.payment_reference != payment_id:
            logger.warning("Order %s already confirmed by payment %s, ignoring %s",
                           order_id, order.payment_reference, payment_id)
        return order

    if order.status != OrderStatus.PENDING:
        raise OrderStateError(f"Order {order_id} is {order.status}")

    order.status = OrderStatus.CONFIRMED
    order.payment_reference = payment_id
    db.commit()
    logger.info("Order %s confirmed by payment %s", order_id, payment_id)
    return order
