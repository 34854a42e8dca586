"""Stub email provider used for development and tests.

Messages are logged and kept in :data:`SENT` instead of being delivered.
"""

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger("orderflow.providers.email")

SENT: List[Dict[str, Any]] = []


def send(event: Any, payload: Dict[str, Any], target: Optional[str]) -> None:
    subject = payload.get("subject", "")
    SENT.append({"event": event, "target": target, **payload})
    logger.info("email to %s: %s", target, subject)
