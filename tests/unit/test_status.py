"""Unit tests for the runtime status tracker."""
import threading

from mci_core.models import ServerStatus
from mci_core.status import StatusTracker, get_status_tracker, reset_status_tracker


class TestStatusTracker:
    """Tests for StatusTracker."""

    def test_unknown_instance_is_stopped(self):
        assert StatusTracker().get("nope") == ServerStatus.STOPPED

    def test_set_and_get(self):
        tracker = StatusTracker()
        tracker.set("a", ServerStatus.STARTING)
        tracker.set("a", ServerStatus.RUNNING)
        assert tracker.get("a") == ServerStatus.RUNNING
        assert tracker.active() == {"a": ServerStatus.RUNNING}

    def test_stopped_instances_are_not_active(self):
        tracker = StatusTracker()
        tracker.set("a", ServerStatus.RUNNING)
        tracker.set("a", ServerStatus.STOPPED)
        assert tracker.active() == {}

    def test_reset_returns_everything_to_stopped(self):
        tracker = StatusTracker()
        tracker.set("a", ServerStatus.RUNNING)
        tracker.set("b", ServerStatus.STOPPING)
        tracker.reset()
        assert tracker.get("a") == ServerStatus.STOPPED
        assert tracker.get("b") == ServerStatus.STOPPED

    def test_concurrent_updates(self):
        tracker = StatusTracker()

        def worker(n):
            for _ in range(200):
                tracker.set(f"i{n}", ServerStatus.RUNNING)
                tracker.set(f"i{n}", ServerStatus.STOPPING)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert tracker.active() == {f"i{n}": ServerStatus.STOPPING for n in range(8)}

    def test_singleton_is_fresh_after_reset(self):
        reset_status_tracker()
        first = get_status_tracker()
        first.set("a", ServerStatus.RUNNING)
        assert get_status_tracker() is first

        reset_status_tracker()
        assert get_status_tracker().get("a") == ServerStatus.STOPPED
        reset_status_tracker()
