"""Risk score components."""

from .base import BaseComponent
from .inactive_ratio import InactiveRatioComponent
from .recency import RecencyComponent
from .user_count import UserCountComponent

__all__ = [
    "BaseComponent",
    "InactiveRatioComponent",
    "RecencyComponent",
    "UserCountComponent",
]
