from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class CreateOrderRequest(BaseModel):
    amount: Optional[float] = None
    currency: Optional[str] = None
    receipt: Optional[str] = None
    notes: Optional[dict] = None


class VerifyPaymentRequest(BaseModel):
    # field names follow the gateway's checkout callback
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    order_id: Optional[str] = None


class SimpleLineItem(BaseModel):
    kind: Literal["simple"]
    product_id: str = Field(min_length=1)
    size: Optional[str] = None
    quantity: int = Field(ge=1)
    unit_price_cents: int = Field(ge=0)


class ComboLineItem(BaseModel):
    kind: Literal["combo"]
    combo_id: str = Field(min_length=1)
    selected_items: List[str] = Field(min_length=1)
    quantity: int = Field(ge=1)
    unit_price_cents: int = Field(ge=0)


LineItem = Annotated[Union[SimpleLineItem, ComboLineItem], Field(discriminator="kind")]


class ShippingAddress(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone: str = Field(pattern=r"^(\+91)?[6-9]\d{9}$")
    address: str = Field(min_length=10, max_length=500)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    pincode: str = Field(pattern=r"^\d{6}$")

    @field_validator("first_name", "last_name", "phone", "address", "city", "state", "pincode",
                     mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value


class OrderIntentRequest(BaseModel):
    items: List[LineItem] = Field(min_length=1)
    shipping_address: ShippingAddress
    currency: Optional[str] = None
    shipping_cents: int = Field(default=0, ge=0)
    coupon_code: Optional[str] = None
    coupon_discount_cents: int = Field(default=0, ge=0)

    def subtotal_cents(self) -> int:
        return sum(item.unit_price_cents * item.quantity for item in self.items)

    def total_cents(self) -> int:
        return self.subtotal_cents() + self.shipping_cents - self.coupon_discount_cents
