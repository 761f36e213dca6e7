from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from foodfantasy.config import settings
from foodfantasy.core.responses import success
from foodfantasy.schemas.payment import PaymentInitiate, PaymentInitiated
from foodfantasy.services.payment import PhonePeClient

router = APIRouter()


def get_payment_client() -> PhonePeClient:
    return PhonePeClient.from_settings(settings)


# 💳 POST: register the payment and hand back the PhonePe page to redirect to
@router.post("/initiate")
async def initiate_payment(
    request: PaymentInitiate,
    client: PhonePeClient = Depends(get_payment_client),
):
    result = await client.initiate(request.amount, request.order_id)
    return success(PaymentInitiated(**result), message="Payment initiated")


# The gateway's status document is passed through unchanged
@router.get("/status/{transaction_id}")
async def payment_status(
    transaction_id: str,
    client: PhonePeClient = Depends(get_payment_client),
):
    body = await client.check_status(transaction_id)
    return JSONResponse(content=body)
