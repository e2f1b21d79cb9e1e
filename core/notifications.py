# core/notifications.py
# User-facing notifications ("toasts"). Every notification is also logged.

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Literal

logger = logging.getLogger(__name__)

Variant = Literal["default", "destructive"]


@dataclass
class Notification:
    title: str
    description: str
    variant: Variant = "default"
    created_at: datetime = field(default_factory=datetime.utcnow)


class Notifier:
    """Collects notifications for the current user/request."""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, title: str, description: str, variant: Variant = "default") -> Notification:
        note = Notification(title=title, description=description, variant=variant)
        self.notifications.append(note)
        level = logging.WARNING if variant == "destructive" else logging.INFO
        logger.log(level, "%s: %s", title, description)
        return note

    def error(self, description: str) -> Notification:
        return self.notify("Error", description, variant="destructive")

    @property
    def errors(self) -> List[Notification]:
        return [n for n in self.notifications if n.variant == "destructive"]

    @property
    def last(self):
        return self.notifications[-1] if self.notifications else None

    def clear(self):
        self.notifications.clear()
