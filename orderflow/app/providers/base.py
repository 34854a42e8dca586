"""Base interface for notification providers."""

from typing import Any, Dict, Optional


def send(event: Any, payload: Dict[str, Any], target: Optional[str]) -> None:
    """Deliver an outbound notification.

    Parameters:
        event: Notification event name, e.g. ``stock.low``.
        payload: Rendered content (``subject``/``html``/``text``).
        target: Recipient address or webhook URL.
    """
    raise NotImplementedError
