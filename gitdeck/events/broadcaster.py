"""Refresh broadcaster.

Three outward channels:

- unscoped refresh (`do_refresh`): base status first, then every scoped
  observer in REFRESH_ORDER, then unscoped listeners, then busy=False
- scoped refresh (`publish`): base status once, then only the observers
  whose scope is in the mask, in REFRESH_ORDER
- busy: a boolean delivered to exactly one consumer

Delivery is synchronous on the caller's thread, which must be the control
thread. Observer exceptions propagate to the publisher.

Observers are held weakly: the broadcaster never keeps a panel or listener
alive. Bound methods are tracked with WeakMethod; callables that cannot be
weakly referenced (builtin methods) are held until unsubscribed.

Usage:
    broadcaster = RefreshBroadcaster(base_refresh=lambda: registry.refresh(reader))
    sub = broadcaster.subscribe(RefreshScope.COMMITS, panel.refresh_commits)
    broadcaster.publish(RefreshScope.COMMITS | RefreshScope.BRANCHES)
    sub.unsubscribe()
"""

from __future__ import annotations

import inspect
import weakref
from collections.abc import Callable

from gitdeck.events.scope import REFRESH_ORDER, RefreshScope

__all__ = ["RefreshBroadcaster", "Subscription"]

Callback = Callable[[], None]
BusyConsumer = Callable[[bool], None]


class _StrongRef:
    """Callable-returning stand-in for objects without weakref support."""

    __slots__ = ("_target",)

    def __init__(self, target: Callback) -> None:
        self._target = target

    def __call__(self) -> Callback:
        return self._target


def _make_ref(callback: Callback) -> Callable[[], Callback | None]:
    if inspect.ismethod(callback):
        return weakref.WeakMethod(callback)
    try:
        return weakref.ref(callback)
    except TypeError:
        return _StrongRef(callback)


class Subscription:
    """Handle returned by subscribe; `unsubscribe()` is idempotent."""

    def __init__(self, broadcaster: RefreshBroadcaster) -> None:
        self._broadcaster = weakref.ref(broadcaster)
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        broadcaster = self._broadcaster()
        if broadcaster is not None:
            broadcaster._remove(self)


_Entry = tuple[Subscription, Callable[[], Callback | None]]


class RefreshBroadcaster:
    """Process-wide refresh notification, owned by the application context."""

    def __init__(self, base_refresh: Callback | None = None) -> None:
        self.base_refresh = base_refresh
        self._scoped: dict[RefreshScope, list[_Entry]] = {scope: [] for scope in REFRESH_ORDER}
        self._unscoped: list[_Entry] = []
        self._busy_consumer: BusyConsumer | None = None

    # -- registration -------------------------------------------------------

    def subscribe(self, scope: RefreshScope, callback: Callback) -> Subscription:
        """Register `callback` for every scope in `scope`.

        A callback subscribed to several scopes runs once per matching scope.
        """
        scopes = tuple(s for s in REFRESH_ORDER if s in scope)
        if not scopes:
            raise ValueError("subscribe() needs at least one refresh scope")
        subscription = Subscription(self)
        ref = _make_ref(callback)
        for s in scopes:
            self._scoped[s].append((subscription, ref))
        return subscription

    def subscribe_unscoped(self, callback: Callback) -> Subscription:
        """Register a listener for the unscoped (global) refresh only."""
        subscription = Subscription(self)
        self._unscoped.append((subscription, _make_ref(callback)))
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscription.unsubscribe()

    def _remove(self, subscription: Subscription) -> None:
        for scope in REFRESH_ORDER:
            self._scoped[scope] = [e for e in self._scoped[scope] if e[0] is not subscription]
        self._unscoped = [e for e in self._unscoped if e[0] is not subscription]

    def set_busy_consumer(self, consumer: BusyConsumer | None) -> None:
        """Install the single busy consumer, replacing any previous one."""
        self._busy_consumer = consumer

    # -- delivery -----------------------------------------------------------

    def busy(self, is_busy: bool) -> None:
        if self._busy_consumer is not None:
            self._busy_consumer(is_busy)


    def publish(self, scope: RefreshScope) -> None:
        """Selective refresh: base status, then the observers in `scope`."""
        self._refresh_base()
        for s in REFRESH_ORDER:
            if s in scope:
                self._notify(self._scoped[s])
        self._prune()

    def do_refresh(self) -> None:
        """Global refresh: base status, every scoped observer, unscoped listeners.

        Ends the refresh chain by clearing the busy signal.
        """
        self._refresh_base()
        for s in REFRESH_ORDER:
            self._notify(self._scoped[s])
        self._notify(self._unscoped)
        self._prune()
        self.busy(False)

    def _refresh_base(self) -> None:
        if self.base_refresh is not None:
            self.base_refresh()

    @staticmethod
    def _notify(entries: list[_Entry]) -> None:
        # Iterate a copy: observers may subscribe or unsubscribe while we deliver
        for subscription, ref in list(entries):
            if not subscription.active:
                continue
            callback = ref()
            if callback is not None:
                callback()

    def _prune(self) -> None:
        """Drop entries whose observer has been garbage collected."""
        for scope in REFRESH_ORDER:
            self._scoped[scope] = [e for e in self._scoped[scope] if e[1]() is not None]
        self._unscoped = [e for e in self._unscoped if e[1]() is not None]

    def observer_count(self, scope: RefreshScope | None = None) -> int:
        """Number of live observers for `scope` (unscoped listeners if None)."""
        if scope is None:
            entries = self._unscoped
        else:
            entries = [e for s in REFRESH_ORDER if s in scope for e in self._scoped[s]]
        return sum(1 for sub, ref in entries if sub.active and ref() is not None)
