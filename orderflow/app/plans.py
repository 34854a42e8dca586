"""Plan capability table and trial-aware plan resolution.

``PLAN_LIMITS`` is the single table of what each subscription plan allows.
Callers resolve the effective plan once with :func:`effective_plan` and ask
:func:`can_access` before doing plan-dependent work.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Dict

from .models import SubscriptionPlan, SubscriptionStatus

DEFAULT_PLAN = SubscriptionPlan.ESSENTIEL.value
# Plans ordered from poorest to richest; active trials get the last one.
PLAN_ORDER = (
    SubscriptionPlan.ESSENTIEL.value,
    SubscriptionPlan.PREMIUM.value,
    SubscriptionPlan.ENTERPRISE.value,
)
TRIAL_PLAN = PLAN_ORDER[-1]

PLAN_LIMITS: Dict[str, Dict[str, Any]] = {
    "essentiel": {
        "max_admins": 2,
        "max_venues": 1,
        "max_menus": 2,
        "max_items": 100,
        "max_ingredients": 0,
        "table_ordering": True,
        "qr_codes": True,
        "realtime_kds": True,
        "advanced_stats": False,
        "multi_language": False,
        "coupons": True,
        "inventory_tracking": False,
        "rupture_workflow": False,
        "stock_alerts": False,
    },
    "premium": {
        "max_admins": 5,
        "max_venues": 3,
        "max_menus": 10,
        "max_items": 500,
        "max_ingredients": 200,
        "table_ordering": True,
        "qr_codes": True,
        "realtime_kds": True,
        "advanced_stats": True,
        "multi_language": True,
        "coupons": True,
        "inventory_tracking": True,
        "rupture_workflow": True,
        "stock_alerts": False,
    },
    "enterprise": {
        "max_admins": 99,
        "max_venues": 99,
        "max_menus": 99,
        "max_items": 9999,
        "max_ingredients": 9999,
        "table_ordering": True,
        "qr_codes": True,
        "realtime_kds": True,
        "advanced_stats": True,
        "multi_language": True,
        "coupons": True,
        "inventory_tracking": True,
        "rupture_workflow": True,
        "stock_alerts": True,
    },
}

USABLE_STATUSES = {
    SubscriptionStatus.TRIAL.value,
    SubscriptionStatus.ACTIVE.value,
    SubscriptionStatus.PAST_DUE.value,
}


def as_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` as an aware UTC datetime (naive values are UTC)."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_trial_active(
    status: str | None, trial_ends_at: datetime | None, now: datetime | None = None
) -> bool:
    if status != SubscriptionStatus.TRIAL.value or trial_ends_at is None:
        return False
    now = as_utc(now) or datetime.now(timezone.utc)
    return as_utc(trial_ends_at) > now


def effective_plan(
    plan: str | None,
    status: str | None,
    trial_ends_at: datetime | None,
    now: datetime | None = None,
) -> str:
    """Resolve the plan whose capabilities apply right now.

    An unexpired trial gets the richest plan whatever ``plan`` says. Every
    other status, including an expired trial, keeps the nominal plan; unknown
    or missing plans fall back to :data:`DEFAULT_PLAN`.
    """

    if is_trial_active(status, trial_ends_at, now):
        return TRIAL_PLAN
    if plan in PLAN_LIMITS:
        return plan
    return DEFAULT_PLAN


def plan_limits(
    plan: str | None,
    status: str | None,
    trial_ends_at: datetime | None,
    now: datetime | None = None,
) -> Dict[str, Any]:
    return PLAN_LIMITS[effective_plan(plan, status, trial_ends_at, now)]


def can_access(
    feature: str,
    plan: str | None,
    status: str | None,
    trial_ends_at: datetime | None,
    now: datetime | None = None,
) -> bool:
    """Return ``True`` if ``feature`` is enabled for the resolved plan.

    Pure lookup, safe to call before scheduling any expensive work. Unknown
    features and numeric limits are reported as not accessible.
    """

    value = plan_limits(plan, status, trial_ends_at, now).get(feature)
    return value is True


def has_reached_limit(
    limit_key: str,
    current_count: int,
    plan: str | None,
    status: str | None,
    trial_ends_at: datetime | None,
    now: datetime | None = None,
) -> bool:
    limits = plan_limits(plan, status, trial_ends_at, now)
    return current_count >= int(limits[limit_key])


def trial_days_remaining(
    trial_ends_at: datetime | None, now: datetime | None = None
) -> int:
    if trial_ends_at is None:
        return 0
    now = as_utc(now) or datetime.now(timezone.utc)
    seconds = (as_utc(trial_ends_at) - now).total_seconds()
    return max(0, math.ceil(seconds / 86400))


def is_subscription_usable(status: str | None) -> bool:
    return status in USABLE_STATUSES


__all__ = [
    "PLAN_LIMITS",
    "PLAN_ORDER",
    "TRIAL_PLAN",
    "DEFAULT_PLAN",
    "as_utc",
    "is_trial_active",
    "effective_plan",
    "plan_limits",
    "can_access",
    "has_reached_limit",
    "trial_days_remaining",
    "is_subscription_usable",
]
