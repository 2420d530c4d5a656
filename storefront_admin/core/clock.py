"""Zaman kaynağı: motor "şimdi"yi asla kendisi okumaz, dışarıdan alır."""
from datetime import datetime, timezone, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class Clock(Protocol):
    def now(self) -> datetime: ...


def resolve_timezone(name: str | None) -> tzinfo:
    """'Europe/Istanbul' gibi IANA adını tzinfo'ya çevirir; boş veya bilinmeyen ad -> UTC."""
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


class SystemClock:
    """Gerçek saat; ayarlardaki saat diliminde timezone-aware datetime döner."""

    def __init__(self, tz: tzinfo | None = None):
        self.tz = tz or timezone.utc

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock:
    """Testler için sabit zaman. Naive datetime UTC kabul edilir."""

    def __init__(self, at: datetime):
        self.at = at if at.tzinfo is not None else at.replace(tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.at
