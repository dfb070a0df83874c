# ============================================================================
# SELECTION CONTROLLER
# ============================================================================
# STATUS: Domain service - Active-asset state machine for map and form
# PURPOSE: Route marker clicks and form edits to one draft, commit or
#          cancel it
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
SelectionController

Two states:

    IDLE     no draft; the form shows the blank new-asset template
    EDITING  draft holds a working copy (of a store entry, or a new asset)

Transitions:
    select_from_map(id)  IDLE|EDITING -> EDITING, draft := copy of store[id]
                         unknown id   -> IDLE + StaleSelectionError
    edit_field(f, v)     mutates the draft only; from IDLE a blank draft
                         is started first (typing into the template)
    commit()             EDITING -> IDLE on success
                         ValidationError -> stays EDITING, draft kept
    cancel()             EDITING -> IDLE, store untouched

The controller never mutates the store directly; commits go through
AssetEditor.
"""

from typing import Any, Dict, Optional

from core.contracts import SelectionState
from core.errors import StaleSelectionError, ValidationError
from core.logging import ComponentType, get_logger, log_context
from core.models.asset import ASSET_FIELDS, CommitResult, Draft
from services.asset_editor import AssetEditor
from services.asset_store import AssetStore

logger = get_logger(__name__, ComponentType.SELECTION)


class SelectionController:
    """Tracks which asset (if any) is active for editing."""

    def __init__(self, store: AssetStore, editor: Optional[AssetEditor] = None):
        self._store = store
        self._editor = editor or AssetEditor(store)
        self._draft: Optional[Draft] = None
        self.last_errors: Dict[str, str] = {}
        self.commit_count = 0

    # ----------------------------------------------------------------
    # State
    # ----------------------------------------------------------------

    @property
    def state(self) -> SelectionState:
        return SelectionState.IDLE if self._draft is None else SelectionState.EDITING

    @property
    def draft(self) -> Optional[Draft]:
        return self._draft

    @property
    def selected_id(self) -> Optional[str]:
        """Id of the store entry the draft was copied from, if any."""
        return self._draft.source_id if self._draft is not None else None

    @property
    def submit_label(self) -> str:
        """Submit button text: update when the draft's id is already registered."""
        if self._draft is not None and self._store.contains(str(self._draft.id).strip()):
            return "Update Asset"
        return "Add Asset"

    def form_values(self) -> Dict[str, Any]:
        """Values for every form field (blank template in IDLE)."""
        if self._draft is None:
            return {name: "" for name in ASSET_FIELDS}
        return self._draft.form_values()

    # ----------------------------------------------------------------
    # Transitions
    # ----------------------------------------------------------------

    def select_from_map(self, asset_id: str) -> Draft:
        """
        Load a copy of a store entry into the draft.

        Any in-progress draft is replaced.

        Raises:
            StaleSelectionError: the id is not in the store (marker
                outlived its asset). State is reset to IDLE first.
        """
        with log_context(asset_id=asset_id, operation="select_from_map"):
            asset = self._store.get(asset_id)
            if asset is None:
                self._reset()
                logger.warning(f"Stale marker selection for {asset_id}, selection reset")
                raise StaleSelectionError(asset_id)

            self._draft = Draft.from_asset(asset)
            self.last_errors = {}
            logger.debug(f"Selected {asset_id} for editing")
            return self._draft

    def new_asset(self) -> Draft:
        """Discard any draft and start the blank new-asset template."""
        self._draft = Draft.blank()
        self.last_errors = {}
        return self._draft

    def edit_field(self, field: str, value: Any) -> Draft:
        """
        Apply one form edit to the draft.

        Raises:
            ValidationError: unknown field name.
        """
        if self._draft is None:
            self._draft = Draft.blank()
        self._editor.apply_field(self._draft, field, value)
        name = self._editor.resolve_field(field)
        self.last_errors.pop(name, None)
        return self._draft

    def commit(self) -> CommitResult:
        """
        Commit the draft through the editor.

        Raises:
            ValidationError: draft is kept and state stays EDITING;
                last_errors holds the per-field messages.
        """
        with log_context(operation="commit"):
            try:
                result = self._editor.commit(self._draft)
            except ValidationError as e:
                self.last_errors = dict(e.field_errors)
                logger.info(f"Commit rejected: {e.message}")
                raise

        self.commit_count += 1
        self._reset()
        return result

    def cancel(self) -> None:
        """Discard the draft. Never touches the store."""
        self._reset()

    def release(self, asset_id: str) -> bool:
        """
        Drop the selection if it points at asset_id (asset was deleted).

        Returns True if the selection was reset.
        """
        if self._draft is not None and self._draft.source_id == asset_id:
            self._reset()
            return True
        return False

    def _reset(self) -> None:
        self._draft = None
        self.last_errors = {}


__all__ = ["SelectionController"]
