import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodfantasy.api import (
    admin_routes,
    cart_routes,
    food_routes,
    offer_routes,
    order_routes,
    payment_routes,
    push_routes,
    websocket_routes,
)
from foodfantasy.config import settings
from foodfantasy.core.errors import DRIVER_CONNECTION_ERRORS, register_exception_handlers
from foodfantasy.crud import admin as admin_crud
from foodfantasy.db import async_session, create_db_and_tables, get_db, ping
from foodfantasy.middleware.request_logging import RequestLoggingMiddleware
from foodfantasy.services import push

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

# Create the FastAPI app
app = FastAPI(title=settings.app_name, version="1.0.0")

register_exception_handlers(app)

app.add_middleware(RequestLoggingMiddleware)

# ✅ Allow the customer and admin frontends (CORS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup():
    log.info("Starting DB setup...")
    await create_db_and_tables()
    log.info("DB schema ready.")

    # ⬇️ Seed the configured super admin if it doesn't exist
    if not settings.super_admin_email:
        log.warning("SUPER_ADMIN_EMAIL not set; no super admin seeded")
        return

    async with async_session() as db:
        existing = await admin_crud.get_admin(db, settings.super_admin_email)
        if existing:
            if not existing.is_super_admin:
                existing.is_super_admin = True
                await db.commit()
                log.info("Promoted %s to super admin", existing.email)
            else:
                log.info("Super admin %s already exists. No seed needed.", existing.email)
        else:
            admin = await admin_crud.create_admin(db, settings.super_admin_email, created_by="system", is_super_admin=True)
            log.info("Created super admin %s", admin.email)


@app.on_event("shutdown")
async def on_shutdown():
    # let slow push deliveries finish so gone subscriptions still get pruned
    await push.wait_for_late_deliveries()


@app.get("/")
async def root():
    return {"message": f"{settings.app_name} is running"}


@app.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    try:
        await ping(db)
    except (SQLAlchemyError, *DRIVER_CONNECTION_ERRORS) as e:
        log.error("health check failed: %r", e)
        return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "disconnected"})
    return {"status": "healthy", "database": "connected"}


# ✅ Core app routers
app.include_router(order_routes.router, prefix="/api/orders", tags=["orders"])
app.include_router(food_routes.router, prefix="/api/foods", tags=["foods"])
app.include_router(offer_routes.router, prefix="/api/offers", tags=["offers"])
app.include_router(cart_routes.router, prefix="/api/cart", tags=["cart"])
app.include_router(admin_routes.router, prefix="/api/admin", tags=["admin"])
app.include_router(push_routes.router, prefix="/api/push", tags=["push"])
app.include_router(payment_routes.router, prefix="/api/payment", tags=["payment"])

# 🔌 Live order and menu events
app.include_router(websocket_routes.router, tags=["realtime"])
