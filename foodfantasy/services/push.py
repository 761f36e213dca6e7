"""
Web push delivery (VAPID) to the subscriptions stored per user email.

Every send returns a result dict and never raises; a subscription the push
service reports as gone (404/410) is deleted.
"""
import asyncio
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from pywebpush import WebPushException, webpush
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from foodfantasy.config import settings
from foodfantasy.crud import admin as admin_crud
from foodfantasy.crud import subscription as subscription_crud
from foodfantasy.db import async_session
from foodfantasy.models.subscription import PushSubscription

log = logging.getLogger(__name__)

DEFAULT_ICON = "/favicon.ico"
GONE_STATUSES = (404, 410)

SENT = "sent"
EXPIRED = "expired"
FAILED = "failed"


def build_payload(
    title: str,
    body: str,
    icon: Optional[str] = None,
    tag: str = "default",
    data: Optional[dict] = None,
    actions: Optional[List[dict]] = None,
    require_interaction: bool = False,
) -> dict[str, Any]:
    """The JSON document the service worker's `push` handler renders."""
    return {
        "title": title,
        "body": body,
        "icon": icon or DEFAULT_ICON,
        "badge": DEFAULT_ICON,
        "tag": tag or "default",
        "data": data or {},
        "actions": actions or [],
        "requireInteraction": require_interaction,
    }


def _not_configured() -> dict[str, Any]:
    log.warning("VAPID keys not configured, push notifications disabled")
    return {"success": False, "error": "VAPID keys not configured"}


async def deliver(sub: PushSubscription, payload: dict) -> str:
    try:
        await run_in_threadpool(
            webpush,
            subscription_info=sub.subscription,
            data=json.dumps(payload),
            vapid_private_key=settings.vapid_private_key,
            vapid_claims={"sub": settings.vapid_subject},
        )
        return SENT
    except WebPushException as e:
        status = getattr(e.response, "status_code", None)
        if status in GONE_STATUSES:
            log.info("push subscription gone: email=%s status=%s", sub.user_email, status)
            return EXPIRED
        log.warning("push delivery failed: email=%s error=%s", sub.user_email, e)
        return FAILED
    except Exception:
        # one bad subscription must not sink the rest of the fan-out
        log.exception("push delivery error: email=%s", sub.user_email)
        return FAILED


# Sessions for work that outlives the request that started it
session_factory = async_session

# Prune jobs for deliveries that finished after the caller stopped waiting
_late_prunes: Set[asyncio.Task] = set()


async def _prune_late(pending: Dict[asyncio.Future, str]) -> int:
    await asyncio.wait(pending.keys())
    expired_ids = [sub_id for task, sub_id in pending.items() if task.result() == EXPIRED]
    if not expired_ids:
        return 0

    async with session_factory() as db:
        removed = await subscription_crud.delete_subscriptions(db, expired_ids)
    log.info("removed %s expired push subscriptions after late delivery", removed)
    return removed


def _watch_late(pending: Dict[asyncio.Future, str]) -> None:
    job = asyncio.ensure_future(_prune_late(pending))
    _late_prunes.add(job)
    job.add_done_callback(_late_prunes.discard)


async def wait_for_late_deliveries() -> None:
    """Blocks until every delivery that outlived its send has been settled."""
    if _late_prunes:
        await asyncio.gather(*list(_late_prunes), return_exceptions=True)


async def _fan_out(db: AsyncSession, subs: List[PushSubscription], payload: dict, timeout: Optional[float]) -> dict[str, Any]:
    tasks = [asyncio.ensure_future(deliver(sub, payload)) for sub in subs]
    done, pending = await asyncio.wait(tasks, timeout=timeout)

    sent = failed = 0
    expired_ids = []
    late = {}
    for sub, task in zip(subs, tasks):
        if task not in done:
            late[task] = sub.id
            continue
        outcome = task.result()
        if outcome == SENT:
            sent += 1
        else:
            failed += 1
            if outcome == EXPIRED:
                expired_ids.append(sub.id)

    removed = await subscription_crud.delete_subscriptions(db, expired_ids)
    if removed:
        log.info("removed %s expired push subscriptions", removed)

    # deliveries still running keep going in the threadpool; gone ones are pruned when they finish
    if late:
        _watch_late(late)

    return {
        "success": True,
        "sent": sent,
        "failed": failed,
        "pending": len(pending),
        "removed": removed,
        "total": len(subs),
    }


async def send_push_to_user(db: AsyncSession, user_email: str, title: str, body: str, timeout: Optional[float] = None, **options) -> dict[str, Any]:
    if not settings.push_enabled:
        return _not_configured()

    sub = await subscription_crud.get_subscription(db, user_email)
    if not sub:
        return {"success": False, "error": "User subscription not found"}

    result = await _fan_out(db, [sub], build_payload(title, body, **options), timeout)
    if result["removed"]:
        return {"success": False, "error": "Subscription expired", "removed": True}
    return {"success": result["sent"] == 1 or result["pending"] == 1, **result}


async def send_push_to_emails(db: AsyncSession, emails: Iterable[str], title: str, body: str, timeout: Optional[float] = None, **options) -> dict[str, Any]:
    if not settings.push_enabled:
        return _not_configured()

    subs = await subscription_crud.get_subscriptions(db, emails)
    if not subs:
        return {"success": True, "sent": 0, "total": 0, "message": "No subscriptions found"}
    return await _fan_out(db, subs, build_payload(title, body, **options), timeout)


async def send_push_to_admins(db: AsyncSession, title: str, body: str, timeout: Optional[float] = None, **options) -> dict[str, Any]:
    if not settings.push_enabled:
        return _not_configured()

    emails = await admin_crud.get_admin_emails(db)
    if not emails:
        log.warning("no admins to notify")
        return {"success": True, "sent": 0, "total": 0, "message": "No admins found"}

    options.setdefault("tag", "admin-notification")
    return await send_push_to_emails(db, emails, title, body, timeout=timeout, **options)


async def send_push_to_all(db: AsyncSession, title: str, body: str, timeout: Optional[float] = None, **options) -> dict[str, Any]:
    if not settings.push_enabled:
        return _not_configured()

    subs = await subscription_crud.get_subscriptions(db)
    if not subs:
        return {"success": True, "sent": 0, "total": 0, "message": "No subscriptions found"}

    options.setdefault("tag", "broadcast")
    return await _fan_out(db, subs, build_payload(title, body, **options), timeout)
