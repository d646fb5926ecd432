"""Flyer activation window."""

from datetime import datetime
from typing import Protocol

from ..models.enums import BasicStatus
from .clock import as_utc


class Windowed(Protocol):
    start_date: datetime
    end_date: datetime
    status: BasicStatus


def is_flyer_active(flyer: Windowed, now: datetime) -> bool:
    """Whether a flyer is live at ``now``: inside [start, end] and enabled.

    Evaluated fresh on every read, never stored on the flyer.
    """
    moment = as_utc(now)
    return (
        as_utc(flyer.start_date) <= moment <= as_utc(flyer.end_date)
        and flyer.status == BasicStatus.ENABLE
    )
