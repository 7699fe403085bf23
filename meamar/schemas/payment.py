from decimal import Decimal
from typing import Optional
from pydantic import Field, model_validator
from meamar.schemas.base import CamelModel

class PaymentIntentCreate(CamelModel):
    amount: Optional[Decimal] = Field(default=None, gt=0)
    currency: str = "QAR"
    # When set, amount and currency are taken from the order
    order_id: Optional[str] = None

    @model_validator(mode="after")
    def check_amount(self):
        if self.amount is None and not self.order_id:
            raise ValueError("amount or orderId is required")
        return self

class PaymentIntent(CamelModel):
    client_secret: str
