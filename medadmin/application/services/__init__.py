from .record_cache import RecordCache
from .mutation_coordinator import MutationCoordinator, RefreshPolicy
from .edit_session import EditSession, Editing, Idle
from .filter_view import FilterView
from .session_gate import SessionGate
from .record_console import RecordConsole

__all__ = [
    "RecordCache",
    "MutationCoordinator",
    "RefreshPolicy",
    "EditSession",
    "Editing",
    "Idle",
    "FilterView",
    "SessionGate",
    "RecordConsole",
]
