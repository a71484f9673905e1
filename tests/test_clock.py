"""
Tests for frame subscriptions.
"""

from unittest.mock import Mock

from snake_canvas.clock import FrameSource


class TestFrameSource:
    """Tests for FrameSource and FrameSubscription."""

    def test_emit_reaches_subscribers_in_order(self):
        source = FrameSource()
        calls = []
        source.subscribe(lambda ts: calls.append(("a", ts)))
        source.subscribe(lambda ts: calls.append(("b", ts)))

        source.emit(16.0)

        assert calls == [("a", 16.0), ("b", 16.0)]

    def test_cancel_stops_delivery(self):
        """A cancelled subscription receives no further frames."""
        source = FrameSource()
        callback = Mock()
        subscription = source.subscribe(callback)

        source.emit(1.0)
        subscription.cancel()
        source.emit(2.0)

        callback.assert_called_once_with(1.0)
        assert subscription.active is False
        assert source.subscriber_count == 0

    def test_cancel_is_idempotent(self):
        source = FrameSource()
        subscription = source.subscribe(Mock())
        subscription.cancel()
        subscription.cancel()
        assert source.subscriber_count == 0

    def test_callback_may_cancel_itself(self):
        """Cancelling from inside the callback doesn't disturb other subscribers."""
        source = FrameSource()
        other = Mock()
        holder = {}

        def once(ts):
            holder["sub"].cancel()

        holder["sub"] = source.subscribe(once)
        source.subscribe(other)

        source.emit(5.0)
        source.emit(6.0)

        assert other.call_count == 2
        assert source.subscriber_count == 1
