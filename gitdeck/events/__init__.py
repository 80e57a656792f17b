"""Refresh propagation and busy signalling."""

from gitdeck.events.broadcaster import RefreshBroadcaster, Subscription
from gitdeck.events.busy import BusyDebouncer, BusyIndicator, RecordingIndicator, RichBusyIndicator
from gitdeck.events.scope import REFRESH_ORDER, RefreshScope

__all__ = [
    "BusyDebouncer",
    "BusyIndicator",
    "REFRESH_ORDER",
    "RecordingIndicator",
    "RefreshBroadcaster",
    "RefreshScope",
    "RichBusyIndicator",
    "Subscription",
]
