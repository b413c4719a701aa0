"""Test doubles for the outbound notifier.

No SMTP, no threads: deliveries are recorded in a list.
"""

from __future__ import annotations

from app.core.exceptions import NotifierError
from app.services.notifier import Notifier, OrderSnapshot


class RecordingNotifier(Notifier):

    name = "recording"

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.delivered: list[OrderSnapshot] = []
        self.attempts = 0
        self.fail_with = fail_with

    async def deliver(self, order: OrderSnapshot) -> None:
        self.attempts += 1
        if self.fail_with is not None:
            raise self.fail_with
        self.delivered.append(order)


def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail_with=NotifierError("smtp down"))
