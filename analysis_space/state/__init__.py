"""
State Layer

Named actions, a pure reducer and the single-dispatch store.

PRINCIPLES:
1. Immutable state snapshots
2. All mutation through AnalysisStore.dispatch
3. No rendering, no scheduling
"""

from .actions import Action, ActionType
from . import actions
from .reducer import (
    AnalysisSpaceState, NetworkState, initial_state, initial_network_state, reduce
)
from .store import AnalysisStore, Listener, Unsubscribe

__all__ = [
    'Action', 'ActionType', 'actions',
    'AnalysisSpaceState', 'NetworkState', 'initial_state', 'initial_network_state', 'reduce',
    'AnalysisStore', 'Listener', 'Unsubscribe',
]
