"""Per-collection edit protocol: at most one row is edited at a time, with a buffered draft."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from medadmin.application.services.mutation_coordinator import MutationCoordinator, RefreshPolicy
from medadmin.application.services.record_cache import RecordCache
from medadmin.domain.entities import AssetFile, Record
from medadmin.domain.exceptions import EntityNotFoundError

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


@dataclass(frozen=True)
class Idle:
    """No row is being edited."""


@dataclass
class Editing:
    """One row is being edited; nothing is written until save."""

    identifier: str
    draft_fields: dict[Enum, Any] = field(default_factory=dict)
    draft_asset: AssetFile | None = None


EditState = Idle | Editing


class EditSession(Generic[R]):
    """State machine cycling between :class:`Idle` and :class:`Editing`.

    Transitions are synchronous; only :meth:`save` awaits (the coordinator).
    """

    def __init__(self, cache: RecordCache[R], coordinator: MutationCoordinator[R]):
        self._cache = cache
        self._coordinator = coordinator
        self._state: EditState = Idle()

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def is_editing(self) -> bool:
        return isinstance(self._state, Editing)

    def editing_identifier(self) -> str | None:
        return self._state.identifier if isinstance(self._state, Editing) else None

    def begin_edit(self, identifier: str) -> Editing:
        """Start editing ``identifier`` with a fresh draft copied from the cache.

        An edit of another row in progress is discarded first; beginning on
        the row already being edited resets its draft.
        """
        record = self._cache.get(identifier)
        if record is None:
            raise EntityNotFoundError(self._cache.record_type.__name__, identifier)

        current = self.editing_identifier()
        if current is not None and current != identifier:
            logger.info("Discarding draft of '%s' to edit '%s'", current, identifier)
            self.cancel()

        self._state = Editing(identifier=identifier, draft_fields=record.draft_fields())
        return self._state

    def set_draft_field(self, field_name: Enum, value: Any) -> Editing:
        """Replace one field of the draft; the cached record is untouched."""
        editing = self._require_editing()
        record_type = self._cache.record_type
        record_type.check_field(field_name)
        if field_name is record_type.asset_field:
            raise ValueError(f"{field_name.value} is changed by selecting a new asset")
        if field_name not in record_type.editable_fields:
            raise ValueError(f"{field_name.value} is not editable")
        editing.draft_fields[field_name] = value
        return editing

    def select_asset(self, asset: AssetFile) -> Editing:
        """Keep ``asset`` pending; it is uploaded only when the draft is saved."""
        editing = self._require_editing()
        editing.draft_asset = asset
        return editing

    async def save(self, *, refresh: RefreshPolicy = RefreshPolicy.LOCAL) -> R | None:
        """Send the edited fields through the coordinator, then return to Idle.

        Only fields whose draft value differs from the cached record are sent.
        On failure the session stays in Editing with the draft intact and the
        coordinator's error propagates.
        """
        editing = self._require_editing()
        record = self._cache.get(editing.identifier)
        if record is None:
            self._state = Idle()
            raise EntityNotFoundError(self._cache.record_type.__name__, editing.identifier)

        changes = {
            f: v for f, v in editing.draft_fields.items() if record.value_of(f) != v
        }
        updated = await self._coordinator.update(
            editing.identifier, changes, editing.draft_asset, refresh=refresh
        )
        if self._state is editing:
            self._state = Idle()
        return updated

    def cancel(self) -> None:
        """Discard the draft with no store calls."""
        self._state = Idle()

    def _require_editing(self) -> Editing:
        if not isinstance(self._state, Editing):
            raise RuntimeError("No record is being edited")
        return self._state
