import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodfantasy.auth.dependencies import get_current_admin
from foodfantasy.core.errors import BadRequestError, NotFoundError
from foodfantasy.core.responses import success
from foodfantasy.crud import offer as offer_crud
from foodfantasy.db import get_db
from foodfantasy.models.admin import Admin
from foodfantasy.schemas.offer import OfferCreate, OfferRead, OfferUpdate

log = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_offers(db: AsyncSession = Depends(get_db)):
    offers = await offer_crud.get_offers(db)
    return success([OfferRead.model_validate(o) for o in offers], message="Offers retrieved successfully")


# 🎉 GET: what the customer banner shows right now
@router.get("/active")
async def list_active_offers(db: AsyncSession = Depends(get_db)):
    offers = await offer_crud.get_active_offers(db)
    return success([OfferRead.model_validate(o) for o in offers], message="Active offers retrieved successfully")


@router.get("/{offer_id}")
async def get_offer(offer_id: str, db: AsyncSession = Depends(get_db)):
    offer = await offer_crud.get_offer(db, offer_id)
    if not offer:
        raise NotFoundError("Offer")
    return success(OfferRead.model_validate(offer), message="Offer retrieved successfully")


@router.post("")
async def create_offer(
    offer_in: OfferCreate,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    offer = await offer_crud.create_offer(db, offer_in)
    log.info("offer created: id=%s by=%s", offer.id, admin.email)
    return success(OfferRead.model_validate(offer), message="Offer created successfully", status_code=201)


@router.put("/{offer_id}")
async def update_offer(
    offer_id: str,
    updates: OfferUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    offer = await offer_crud.get_offer(db, offer_id)
    if not offer:
        raise NotFoundError("Offer")

    # The window is checked against whatever the update leaves in place
    sent = updates.model_dump(exclude_unset=True)
    valid_from = sent.get("valid_from", offer.valid_from)
    valid_until = sent.get("valid_until", offer.valid_until)
    if valid_from and valid_until and valid_until < valid_from:
        raise BadRequestError("validUntil must not be earlier than validFrom")

    offer = await offer_crud.update_offer(db, offer_id, updates)
    log.info("offer updated: id=%s by=%s", offer.id, admin.email)
    return success(OfferRead.model_validate(offer), message="Offer updated successfully")


@router.delete("/{offer_id}")
async def delete_offer(
    offer_id: str,
    db: AsyncSession = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    offer = await offer_crud.delete_offer(db, offer_id)
    if not offer:
        raise NotFoundError("Offer")
    log.info("offer deleted: id=%s by=%s", offer_id, admin.email)
    return success({"id": offer_id}, message="Offer deleted successfully")
