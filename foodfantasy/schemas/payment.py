from typing import Optional

from pydantic import Field

from foodfantasy.schemas.common import CamelModel


class PaymentInitiate(CamelModel):
    amount: float = Field(..., ge=0.01)  # rupees; the gateway is sent paise
    order_id: Optional[str] = None
    user_id: Optional[str] = None


class PaymentInitiated(CamelModel):
    redirect_url: str
    merchant_transaction_id: str
