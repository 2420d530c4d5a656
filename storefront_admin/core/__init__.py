from .clock import Clock, FixedClock, SystemClock
from .config import settings

__all__ = ["Clock", "FixedClock", "SystemClock", "settings"]
