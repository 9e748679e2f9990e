"""Fake tracking provider — deterministic tracking ids for tests and development."""

from itertools import count

from backoffice.tracking.port import TrackingProviderPort


class FakeTrackingProvider(TrackingProviderPort):
    """Issues sequential `SP...` tracking ids; can be told to fail."""

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Tracking provider unavailable"
        self.issued: list[tuple[str, str]] = []
        self._sequence = count(1)

    def configure(self, should_succeed: bool = True, failure_reason: str = "Tracking provider unavailable"):
        """Configure the fake provider behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def generate_tracking_id(self, record_id: str) -> dict:
        if not self.should_succeed:
            return {"tracking_id": None, "error": self.failure_reason}

        tracking_id = f"SP{next(self._sequence):010d}"
        self.issued.append((record_id, tracking_id))
        return {"tracking_id": tracking_id}
