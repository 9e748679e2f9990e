"""Notification dispatcher access — pluggable adapter, fake by default."""

import os

_notifier_instance = None


def get_notifier():
    """Return the configured notifier (singleton), selected by the NOTIFIER environment variable."""
    global _notifier_instance
    if _notifier_instance is None:
        adapter = os.environ.get("NOTIFIER", "fake")
        if adapter == "fake":
            from backoffice.notifications.fake_adapter import FakeNotifier

            _notifier_instance = FakeNotifier()
        else:
            raise ValueError(f"Unknown notifier: {adapter}")
    return _notifier_instance


def reset_notifier():
    """Reset the notifier singleton (useful for testing)."""
    global _notifier_instance
    _notifier_instance = None
