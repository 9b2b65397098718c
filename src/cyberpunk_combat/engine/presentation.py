"""Presentation sink: where resolved actions are sent for display.

Rendering is not the engine's job. A sink receives a template id and a
pydantic payload (AttackResult, SaveResult, CheckResult, FumbleResult)
and user-facing notifications such as "out of ammo".
"""

from __future__ import annotations

from typing import Literal, Protocol, runtime_checkable

from pydantic import BaseModel

from cyberpunk_combat.core.logging import get_logger


logger = get_logger(__name__)

NotifyLevel = Literal["info", "warning", "error"]


@runtime_checkable
class PresentationSink(Protocol):
    """Receiver of chat payloads and notifications."""

    def publish(self, template: str, payload: BaseModel) -> None:
        ...

    def notify(self, level: NotifyLevel, message: str) -> None:
        ...


class CollectingSink:
    """Sink that keeps everything it receives, in order.

    Used as the engine default and in tests; payloads are also logged.

    Attributes:
        published: (template, payload) pairs.
        notifications: (level, message) pairs.
    """

    def __init__(self) -> None:
        self.published: list[tuple[str, BaseModel]] = []
        self.notifications: list[tuple[NotifyLevel, str]] = []

    def publish(self, template: str, payload: BaseModel) -> None:
        self.published.append((template, payload))
        logger.debug("Payload published", template=template, payload_type=type(payload).__name__)

    def notify(self, level: NotifyLevel, message: str) -> None:
        self.notifications.append((level, message))
        match level:
            case "error":
                logger.error("User notification", message=message)
            case "warning":
                logger.warning("User notification", message=message)
            case _:
                logger.info("User notification", message=message)

    def templates(self) -> list[str]:
        return [template for template, _ in self.published]

    def clear(self) -> None:
        self.published.clear()
        self.notifications.clear()


__all__ = [
    "NotifyLevel",
    "PresentationSink",
    "CollectingSink",
]
