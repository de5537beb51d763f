"""Ports to the UI: a notification sink and a confirmation prompt.

The core never renders anything itself. It reports outcomes to a
``Notifier`` and asks a ``Confirmer`` before destructive steps. The
defaults here log notifications and refuse every confirmation, so
nothing destructive happens without a real prompt wired in.
"""

from __future__ import annotations

import logging
from typing import Literal, Protocol

logger = logging.getLogger(__name__)

NotificationKind = Literal["success", "error"]


class Notifier(Protocol):
    def notify(self, kind: NotificationKind, message: str) -> None: ...


class Confirmer(Protocol):
    def __call__(self, message: str) -> bool: ...


class LoggingNotifier:
    """Routes ``success`` to INFO and ``error`` to ERROR."""

    def notify(self, kind: NotificationKind, message: str) -> None:
        if kind == "error":
            logger.error(message)
        else:
            logger.info(message)


def deny_all(message: str) -> bool:
    logger.warning("Confirmation refused (no prompt configured): %s", message)
    return False


def approve_all(message: str) -> bool:
    """Confirmer for unattended runs (scripts, tests) that accepts every prompt."""
    logger.info("Auto-confirmed: %s", message)
    return True
