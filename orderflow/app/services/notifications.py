"""Low-stock digest rendering and dispatch.

Provider modules are looked up by dotted path, so deployments swap the
delivery transport through configuration alone.
"""

from __future__ import annotations

import asyncio
import importlib
import logging
from typing import Iterable, Sequence

from config import get_settings

from ..alerts.render import render_email, render_message
from ..domain import StockLevel
from ..errors import NotificationFailure
from ..obs import capture_exception

logger = logging.getLogger("orderflow.notifications")

EVENT_LOW_STOCK = "stock.low"

SUBJECT_TPL = (
    "{% if out_items %}{{ tenant_name }}: {{ out_items|length }} item(s) out of stock"
    "{% else %}{{ tenant_name }}: {{ low_items|length }} item(s) running low{% endif %}"
)


def provider_registry() -> dict:
    settings = get_settings()
    return {
        "email": settings.alerts_email_provider,
        "slack": settings.alerts_slack_provider,
    }


def digest_vars(
    tenant_name: str, tenant_slug: str, items: Iterable[StockLevel]
) -> dict:
    """Template variables with out-of-stock items listed first."""
    items = list(items)
    return {
        "tenant_name": tenant_name,
        "out_items": [i for i in items if i.is_out],
        "low_items": [i for i in items if not i.is_out],
        "dashboard_url": f"{get_settings().app_url.rstrip('/')}/sites/{tenant_slug}/admin/inventory",
    }


def _deliver(channel: str, payload: dict, targets: Sequence[str]) -> None:
    module = importlib.import_module(provider_registry()[channel])
    for target in targets:
        module.send(EVENT_LOW_STOCK, payload, target)


async def send_low_stock_digest(
    tenant_name: str,
    tenant_slug: str,
    items: Iterable[StockLevel],
    recipients: Sequence[str],
) -> bool:
    """Send one digest covering ``items`` to every recipient.

    Returns ``False`` without sending when there is nothing to report or
    nobody to notify, and when delivery fails; failures are logged and
    reported to the error sink.
    """

    items = list(items)
    recipients = [r for r in recipients if r]
    if not items or not recipients:
        return False
    context = digest_vars(tenant_name, tenant_slug, items)
    subject, html = render_email("low_stock.html", context, SUBJECT_TPL)
    text = render_message("low_stock.txt", context)
    try:
        await asyncio.to_thread(
            _deliver, "email", {"subject": subject, "html": html, "text": text}, recipients
        )
        webhook = get_settings().slack_webhook_url
        if webhook:
            await asyncio.to_thread(_deliver, "slack", {"text": text}, [webhook])
    except Exception as exc:
        logger.error("low stock digest delivery failed", extra={"tenant": tenant_slug})
        capture_exception(NotificationFailure(str(exc)))
        return False
    return True


__all__ = ["send_low_stock_digest", "digest_vars", "EVENT_LOW_STOCK"]
