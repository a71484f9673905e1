"""
Frame signal subscriptions.

The platform layer owns the real clock and calls ``FrameSource.emit`` once per
display refresh. Subscribers receive the frame timestamp in milliseconds and
must cancel their subscription on teardown.
"""

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameSubscription:
    """Handle returned by ``FrameSource.subscribe``."""

    def __init__(self, source: "FrameSource", callback: FrameCallback):
        self._source = source
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        """Stop receiving frames. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self._source._remove(self)


class FrameSource:
    """Fan-out of timestamped frame signals to subscribers, in subscription order."""

    def __init__(self):
        self._subscriptions: List[FrameSubscription] = []

    def subscribe(self, callback: FrameCallback) -> FrameSubscription:
        subscription = FrameSubscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def emit(self, timestamp: float) -> None:
        # Copy so a callback may cancel itself mid-dispatch
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.callback(timestamp)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _remove(self, subscription: FrameSubscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            logger.debug("Subscription already removed")
