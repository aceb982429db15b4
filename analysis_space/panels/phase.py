"""
Side-Panel Phase Controller
===========================

Progressive disclosure of the analysis side panel.

PHASES:
=======
HIDDEN -> BASIC      activate()          canvas mounted
any    -> SHELL      open() / toggle()   panel frame shown, content not yet mounted
SHELL  -> FULL       settle delay        content mounted
any    -> BASIC      close()             content unmounted, pending settle cancelled
any    -> HIDDEN     dispose()

GUARANTEES:
===========
1. At most one panel content is mounted at a time
2. Content of a previous panel is unmounted before the next is shown
3. A settle scheduled for a panel that is no longer active never mounts it
4. Only the settle transition is deferred; everything else is synchronous
5. A scheduler that cannot defer (no event loop) settles the panel at once
   instead of leaving it stuck in SHELL
"""

from __future__ import annotations
from enum import IntEnum
from typing import Callable, List, Optional
import logging

from ..contracts.base import SidePanelType
from ..state import actions
from ..state.store import AnalysisStore
from .content import ContentFactory, PanelContent, content_factory
from .scheduling import Cancellable, Scheduler

LOGGER = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY = 0.1


class PanelPhase(IntEnum):
    HIDDEN = 0
    BASIC = 1
    SHELL = 2
    FULL = 3


PhaseListener = Callable[[PanelPhase, Optional[SidePanelType]], None]


class PhaseController:
    """Drives PanelPhase transitions and owns the mounted panel content."""

    def __init__(
        self,
        store: AnalysisStore,
        scheduler: Scheduler,
        factory: Optional[ContentFactory] = None,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
    ):
        self._store = store
        self._scheduler = scheduler
        self._factory = factory or content_factory(store)
        self._settle_delay = settle_delay
        self._phase = PanelPhase.HIDDEN
        self._content: Optional[PanelContent] = None
        self._pending: Optional[Cancellable] = None
        self._settle_token = 0
        self._last_settled = 0
        self._listeners: List[PhaseListener] = []

    @property
    def phase(self) -> PanelPhase:
        return self._phase

    @property
    def active_panel(self) -> Optional[SidePanelType]:
        return self._store.state.active_side_panel

    @property
    def content(self) -> Optional[PanelContent]:
        return self._content

    @property
    def has_pending_settle(self) -> bool:
        return self._pending is not None

    def on_phase_change(self, listener: PhaseListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def activate(self) -> None:
        if self._phase is PanelPhase.HIDDEN:
            self._set_phase(PanelPhase.BASIC)

    def open(self, panel: SidePanelType) -> None:
        self._store.dispatch(actions.set_active_side_panel(panel))
        self._enter_shell(panel)

    def toggle(self, panel: SidePanelType) -> None:
        """Open `panel`, or close it when it is already the active one."""
        self._store.dispatch(actions.toggle_side_panel(panel))
        active = self._store.state.active_side_panel
        if active is None:
            self._enter_basic()
        else:
            self._enter_shell(active)

    def close(self) -> None:
        self._store.dispatch(actions.set_active_side_panel(None))
        self._enter_basic()

    def dispose(self) -> None:
        self._cancel_pending()
        self._unmount_content()
        self._set_phase(PanelPhase.HIDDEN)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _enter_shell(self, panel: SidePanelType) -> None:
        self._cancel_pending()
        self._unmount_content()
        self._settle_token += 1
        token = self._settle_token
        self._set_phase(PanelPhase.SHELL)
        try:
            handle = self._scheduler.call_later(
                self._settle_delay, lambda: self._settle(panel, token)
            )
        except RuntimeError as exc:
            LOGGER.warning("Scheduler unavailable (%s); settling %s panel now", exc, panel.value)
            self._settle(panel, token)
            return
        # An immediate scheduler has already run the settle.
        if self._last_settled != token:
            self._pending = handle

    def _enter_basic(self) -> None:
        self._cancel_pending()
        self._unmount_content()
        self._set_phase(PanelPhase.BASIC)

    def _settle(self, panel: SidePanelType, token: int) -> None:
        self._last_settled = token
        if token == self._settle_token:
            self._pending = None
        if (
            token != self._settle_token
            or self._phase is not PanelPhase.SHELL
            or self.active_panel is not panel
        ):
            LOGGER.debug("Dropping stale settle for %s panel", panel.value)
            return
        content = self._factory(panel)
        content.mount()
        self._content = content
        self._set_phase(PanelPhase.FULL)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _unmount_content(self) -> None:
        if self._content is not None:
            self._content.unmount()
            self._content = None

    def _set_phase(self, phase: PanelPhase) -> None:
        if phase is self._phase:
            return
        previous = self._phase
        self._phase = phase
        LOGGER.debug("Panel phase %s -> %s", previous.name, phase.name)
        for listener in list(self._listeners):
            try:
                listener(phase, self.active_panel)
            except Exception:
                LOGGER.exception("Phase listener failed")
