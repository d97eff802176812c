"""Tests for stdout notification delivery."""

import io

import orjson

from cryptomon.delivery.stdout_delivery import StdoutNotifier


class TestStdoutNotifier:
    """Test StdoutNotifier output and statistics."""

    def test_pretty_format(self):
        stream = io.StringIO()
        notifier = StdoutNotifier(stream=stream)

        assert notifier.deliver(7, "BTC: BUY signal", "Bitcoin flagged BUY by multi-algorithm vote.")

        line = stream.getvalue().strip()
        assert line.endswith("BTC: BUY signal - Bitcoin flagged BUY by multi-algorithm vote.")
        assert line.startswith("[")

    def test_json_format(self):
        stream = io.StringIO()
        notifier = StdoutNotifier(format="json", stream=stream)

        notifier.deliver(42, "ETH: SELL signal", "Ethereum flagged SELL by multi-algorithm vote.")

        payload = orjson.loads(stream.getvalue())
        assert payload["id"] == 42
        assert payload["title"] == "ETH: SELL signal"
        assert "timestamp" in payload

    def test_disabled(self):
        stream = io.StringIO()
        notifier = StdoutNotifier(stream=stream, enabled=False)

        assert notifier.deliver(1, "t", "m") is False
        assert stream.getvalue() == ""

    def test_closed_stream_reports_failure(self):
        stream = io.StringIO()
        stream.close()
        notifier = StdoutNotifier(stream=stream)

        assert notifier.deliver(1, "t", "m") is False
        assert notifier.get_stats()["error_count"] == 1

    def test_stats(self):
        notifier = StdoutNotifier(stream=io.StringIO())
        notifier.deliver(1, "a", "b")
        notifier.deliver(2, "c", "d")

        stats = notifier.get_stats()
        assert stats["delivery_count"] == 2
        assert stats["success_rate"] == 1.0

        notifier.reset_stats()
        assert notifier.get_stats()["delivery_count"] == 0
