"""Cut sheet change history: the audited write protocol and ledger queries.

Every mutation goes through run_audited():

1. The caller has already fetched the sub-state it is about to change.
2. ``write()`` persists the new sub-state and returns a ChangeRecord with the
   before/after of exactly that sub-state.
3. One CutSheetHistory entry is appended.

With CUTSHEETS_ATOMIC_HISTORY the write and the entry share one transaction.
Otherwise they are separate writes: a failed primary write aborts before any
history is written, and a failed history write after a successful primary
write is logged, stamped on the cut sheet as ``audit_gap_at`` and reported
on the result as ``audit_gap=True``.

Reads return empty results for callers who cannot see the cut sheet.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Tuple

from django.db import DatabaseError, transaction
from django.utils import timezone

from .access import get_visible_cut_sheet
from .choices import ActorRole, ChangeType
from .conf import is_atomic_history
from .middleware import get_current_actor
from .models import CutSheet, CutSheetHistory
from .results import OperationResult
from .signals import send_cut_sheet_changed

logger = logging.getLogger(__name__)


@dataclass
class ChangeRecord:
    """What a mutation changed, as it will appear in the ledger."""

    change_category: str
    summary: str
    previous_state: Optional[dict]
    new_state: dict
    change_type: str = ChangeType.UPDATED
    changed_fields: Optional[List[str]] = None
    affected_cut_id: Optional[str] = None
    affected_package_id: Any = None
    # Set by creations, whose document does not exist before write()
    cut_sheet: Optional[CutSheet] = None

    def fields(self) -> List[str]:
        if self.changed_fields is not None:
            return list(self.changed_fields)
        return list(dict.fromkeys([*(self.previous_state or {}), *self.new_state]))


def append_entry(cut_sheet: CutSheet, actor, record: ChangeRecord) -> CutSheetHistory:
    """Insert one history entry. Internal: entries are only written by mutations."""
    return CutSheetHistory.objects.create(
        cut_sheet=cut_sheet,
        processing_order_id=cut_sheet.processing_order_id,
        changed_by_user_id=actor.user_id,
        changed_by_org_id=actor.organization_id,
        changed_by_role=actor.role,
        change_type=record.change_type,
        change_category=record.change_category,
        change_summary=record.summary,
        previous_state=record.previous_state,
        new_state=record.new_state,
        changed_fields=record.fields(),
        affected_cut_id=record.affected_cut_id,
        affected_package_id=record.affected_package_id,
    )


def _flag_audit_gap(cut_sheet: CutSheet) -> None:
    try:
        CutSheet.objects.filter(pk=cut_sheet.pk).update(audit_gap_at=timezone.now())
    except DatabaseError:
        logger.exception("Could not flag audit gap on cut sheet %s", cut_sheet.pk)


def run_audited(
    cut_sheet: Optional[CutSheet],
    actor,
    write: Callable[[], Tuple[ChangeRecord, Any]],
) -> OperationResult:
    """Run a primary write and append its history entry.

    Args:
        cut_sheet: Document the change belongs to (None for creations, whose
            ChangeRecord carries the new document)
        actor: Acting principal recorded on the entry
        write: Performs the primary write; returns (ChangeRecord, result data)

    Returns:
        OperationResult.ok(data), with audit_gap=True if the history entry
        could not be written after the primary write succeeded.

    Raises:
        DatabaseError and CutSheetError from ``write`` (and, in atomic mode,
        from the history insert) propagate to the caller.
    """
    if is_atomic_history():
        with transaction.atomic():
            record, data = write()
            cut_sheet = record.cut_sheet or cut_sheet
            entry = append_entry(cut_sheet, actor, record)
    else:
        with transaction.atomic():
            record, data = write()
        cut_sheet = record.cut_sheet or cut_sheet
        try:
            with transaction.atomic():
                entry = append_entry(cut_sheet, actor, record)
        except (DatabaseError, TypeError, ValueError):
            logger.error(
                "Audit gap: %s on cut sheet %s by %s %s was saved without a history entry",
                record.change_category, cut_sheet.pk, actor.role, actor.user_id,
                exc_info=True,
            )
            _flag_audit_gap(cut_sheet)
            return OperationResult.ok(data, audit_gap=True)

    logger.info(
        "Cut sheet %s %s by %s %s: %s",
        cut_sheet.pk, record.change_category, actor.role, actor.user_id, record.summary,
    )
    send_cut_sheet_changed(entry)
    return OperationResult.ok(data)


# =============================================================================
# QUERIES
# =============================================================================

def _history_for(cut_sheet_id, actor):
    actor = actor or get_current_actor()
    if get_visible_cut_sheet(actor, cut_sheet_id) is None:
        logger.debug("History of cut sheet %s not visible to %r", cut_sheet_id, actor)
        return None
    return CutSheetHistory.objects.filter(cut_sheet_id=cut_sheet_id)


def get_history(cut_sheet_id, *, actor=None) -> List[CutSheetHistory]:
    """All entries for a cut sheet, newest first."""
    entries = _history_for(cut_sheet_id, actor)
    return list(entries.order_by('-created_at', '-id')) if entries is not None else []


def get_history_by_category(cut_sheet_id, category: str, *, actor=None) -> List[CutSheetHistory]:
    entries = _history_for(cut_sheet_id, actor)
    if entries is None:
        return []
    return list(entries.filter(change_category=category).order_by('-created_at', '-id'))


def get_history_by_role(cut_sheet_id, role: str, *, actor=None) -> List[CutSheetHistory]:
    entries = _history_for(cut_sheet_id, actor)
    if entries is None:
        return []
    return list(entries.filter(changed_by_role=role).order_by('-created_at', '-id'))


@dataclass(frozen=True)
class HistorySummary:
    total_changes: int = 0
    producer_changes: int = 0
    processor_changes: int = 0
    last_modified: Optional[datetime] = None
    last_modified_by: Optional[str] = None


def get_history_summary(cut_sheet_id, *, actor=None) -> HistorySummary:
    """Change counts per role and the most recent change."""
    entries = _history_for(cut_sheet_id, actor)
    if entries is None:
        return HistorySummary()

    rows = list(entries.order_by('-created_at', '-id').values_list('changed_by_role', 'created_at'))
    if not rows:
        return HistorySummary()
    return HistorySummary(
        total_changes=len(rows),
        producer_changes=sum(1 for role, _ in rows if role == ActorRole.PRODUCER),
        processor_changes=sum(1 for role, _ in rows if role == ActorRole.PROCESSOR),
        last_modified=rows[0][1],
        last_modified_by=rows[0][0],
    )


def get_original_state(cut_sheet_id, *, actor=None) -> Optional[dict]:
    """new_state of the creation entry, i.e. the cut sheet as first submitted."""
    entries = _history_for(cut_sheet_id, actor)
    if entries is None:
        return None
    entry = entries.filter(change_type=ChangeType.CREATED).order_by('created_at', 'id').first()
    return entry.new_state if entry else None
