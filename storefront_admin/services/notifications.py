"""Bildirim kuyruğu: çağıran tarafa ait; global toast zamanlayıcısı yok."""
from typing import Literal

from pydantic import BaseModel

NotificationKind = Literal["success", "error", "info"]
DEFAULT_DURATION_MS = 3000


class Notification(BaseModel):
    message: str
    kind: NotificationKind = "info"
    duration_ms: int = DEFAULT_DURATION_MS


class NotificationQueue:
    """İstek (veya ekran) başına bir kuyruk; drain() ile okunup boşaltılır."""

    def __init__(self) -> None:
        self._items: list[Notification] = []

    def push(self, message: str, kind: NotificationKind = "info", duration_ms: int = DEFAULT_DURATION_MS) -> Notification:
        item = Notification(message=message, kind=kind, duration_ms=duration_ms)
        self._items.append(item)
        return item

    def success(self, message: str) -> Notification:
        return self.push(message, "success")

    def error(self, message: str) -> Notification:
        return self.push(message, "error")

    def drain(self) -> list[Notification]:
        items, self._items = self._items, []
        return items

    def __len__(self) -> int:
        return len(self._items)
