"""Cut sheet services: document creation and audited mutations.

- Producers create cut sheets for an order and submit them
- Processors overlay modifications, removals and additions; the producer's
  items are never edited or deleted
- Every mutation appends exactly one history entry (see history.run_audited)
- Every public function returns an OperationResult

All functions take an optional ``actor``; when omitted the actor set by
ActorContextMiddleware is used.
"""
import json
import logging
from decimal import Decimal, InvalidOperation

from django.core.serializers.json import DjangoJSONEncoder
from django.db import IntegrityError, transaction
from django.utils import timezone

from .access import get_cut_sheet_for_owner, get_cut_sheet_for_processor
from .actors import require_actor
from .choices import ChangeCategory, ChangeType, CutSheetStatus
from .config import get_config, get_custom_cuts
from .diff import format_number
from .exceptions import (
    AlreadyAdded,
    AlreadyExists,
    AlreadyRemoved,
    InvalidSelection,
    InvalidState,
    NotAuthorized,
)
from .history import ChangeRecord, run_audited
from .models import AddedCut, CutModification, CutSheet, CutSheetItem, CutSheetSausage, RemovedCut
from .results import OperationResult, returns_result
from .state import CutSheetState, json_number, sheet_fields_from_state, snapshot_sheet
from .taxonomy import SAUSAGE_FLAVOR_IDS, get_animal_schema, locate_cut
from .validation import validate_selections

logger = logging.getLogger(__name__)


def as_state(state) -> CutSheetState:
    if isinstance(state, CutSheetState):
        return state
    return CutSheetState.from_dict(state)


def _touch(cut_sheet: CutSheet, actor) -> None:
    """Stamp who last modified the cut sheet."""
    cut_sheet.last_modified_by_role = actor.role
    cut_sheet.last_modified_by_user_id = actor.user_id
    cut_sheet.save(update_fields=['last_modified_by_role', 'last_modified_by_user_id', 'updated_at'])


def parse_weight(weight) -> Decimal:
    """Positive weight in pounds as a two-place Decimal."""
    try:
        value = Decimal(str(weight)).quantize(Decimal('0.01'))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidState(f"Invalid weight: {weight!r}")
    if value <= 0:
        raise InvalidState('Weight must be greater than zero')
    return value


# =============================================================================
# CREATION
# =============================================================================

def check_selections(state: CutSheetState, config=None) -> None:
    """Validate a state's selections against the taxonomy and the processor's offer.

    Raises:
        InvalidSelection: On an unknown animal, an animal or cut the
            processor does not offer, or a taxonomy constraint violation
    """
    if get_animal_schema(state.animal_type) is None:
        raise InvalidSelection(f"Unknown animal type: {state.animal_type}")

    custom_ids = set()
    if config is not None:
        if state.animal_type not in config.enabled_animals:
            raise InvalidSelection(f"This processor does not accept {state.animal_type}")
        custom_ids = {cut.id for cut in get_custom_cuts(config)}

    for cut_id in state.cut_ids():
        location = locate_cut(cut_id)
        if location is None:
            if cut_id not in custom_ids:
                raise InvalidSelection(f"Unknown cut: {cut_id}")
        elif location.animal_type != state.animal_type:
            raise InvalidSelection(f"{cut_id} is not a {state.animal_type} cut")
        elif config is not None and cut_id in config.disabled_cuts:
            raise InvalidSelection(f'"{location.cut.name}" is not offered by this processor')

    if state.sausages and not state.is_pork:
        raise InvalidSelection('Sausage is only available for pork')
    disabled_flavors = set(config.disabled_sausage_flavors) if config is not None else set()
    for sausage in state.sausages:
        if sausage.flavor not in SAUSAGE_FLAVOR_IDS or sausage.flavor in disabled_flavors:
            raise InvalidSelection(f"Sausage flavor not offered: {sausage.flavor}")

    _check_numbers(state)
    result = validate_selections(state.animal_type, state.cut_ids())
    if not result.is_valid:
        raise InvalidSelection(result.errors[0].message, result.errors)


def _check_numbers(state: CutSheetState) -> None:
    numbers = [('hanging weight', state.hanging_weight), ('ground package weight', state.ground_package_weight)]
    for selection in state.selected_cuts.values():
        numbers.append((f"{selection.cut_id} weight", selection.weight_lbs))
        numbers.append((f"{selection.cut_id} pieces per package", selection.pieces_per_package))
    numbers.extend((f"{s.flavor} pounds", s.pounds) for s in state.sausages)
    for label, value in numbers:
        if value is None or value == '':
            continue
        try:
            valid = not isinstance(value, bool) and Decimal(str(value)) >= 0
        except InvalidOperation:
            valid = False
        if not valid:
            raise InvalidSelection(f"Invalid {label}: {value!r}")


def create_document(state: CutSheetState, actor, *, template: bool = False, **fields) -> CutSheet:
    """Insert a cut sheet with its items and sausages. Caller owns the transaction."""
    values = sheet_fields_from_state(state, template=template)
    values.update(fields)
    cut_sheet = CutSheet.objects.create(
        producer_id=actor.organization_id,
        created_by_user_id=actor.user_id,
        is_template=template,
        last_modified_by_role=actor.role,
        last_modified_by_user_id=actor.user_id,
        **values,
    )

    items = []
    for index, selection in enumerate(state.selected_cuts.values()):
        location = locate_cut(selection.cut_id)
        items.append(CutSheetItem(
            cut_sheet=cut_sheet,
            cut_id=selection.cut_id,
            cut_name=selection.cut_name or (location.cut.name if location else selection.cut_id),
            primal_id=location.primal.id if location else '',
            cut_category=selection.category or '',
            thickness=selection.thickness or None,
            weight_lbs=selection.weight_lbs or None,
            pieces_per_package=selection.pieces_per_package,
            notes=selection.notes,
            sort_order=index,
        ))
    CutSheetItem.objects.bulk_create(items)

    if state.is_pork:
        CutSheetSausage.objects.bulk_create([
            CutSheetSausage(cut_sheet=cut_sheet, flavor=s.flavor, pounds=s.pounds)
            for s in state.sausages
        ])

    # Decimal columns as stored
    cut_sheet.refresh_from_db()
    return cut_sheet


def creation_record(cut_sheet: CutSheet, summary: str) -> ChangeRecord:
    new_state = snapshot_sheet(cut_sheet)
    return ChangeRecord(
        change_type=ChangeType.CREATED,
        change_category=ChangeCategory.INITIAL_CREATION,
        summary=summary,
        previous_state=None,
        new_state=new_state,
        changed_fields=list(new_state.keys()),
        cut_sheet=cut_sheet,
    )


@returns_result
def create_cut_sheet(state, processing_order_id: str, processor_id: str, *, actor=None) -> OperationResult:
    """Create a producer's cut sheet for a processing order.

    Args:
        state: CutSheetState (or its dict form) with the producer's selections
        processing_order_id: Order the cut sheet belongs to
        processor_id: Processor organization assigned to the order
        actor: Producer principal

    Returns:
        OperationResult with the new CutSheet as ``data``

    Raises (as failed results):
        NotAuthorized: If the actor is not a producer
        AlreadyExists: If the order already has a cut sheet
        InvalidSelection: If selections break taxonomy or processor rules
    """
    actor = require_actor(actor)
    if not actor.is_producer:
        raise NotAuthorized('Only producers can create cut sheets')
    state = as_state(state)
    check_selections(state, get_config(processor_id))

    if CutSheet.objects.filter(processing_order_id=processing_order_id, is_template=False).exists():
        raise AlreadyExists('This order already has a cut sheet')

    def write():
        try:
            with transaction.atomic():
                cut_sheet = create_document(
                    state,
                    actor,
                    processing_order_id=processing_order_id,
                    processor_id=processor_id,
                )
        except IntegrityError:
            # Concurrent creation for the same order
            raise AlreadyExists('This order already has a cut sheet')
        return creation_record(cut_sheet, 'Cut sheet created'), cut_sheet

    return run_audited(None, actor, write)


@returns_result
def create_cut_sheet_from_template(template_id, processing_order_id: str, processor_id: str, *, actor=None) -> OperationResult:
    """Create an order's cut sheet from one of the producer's templates."""
    from .templates import load_template

    actor = require_actor(actor)
    state = load_template(template_id, actor=actor)
    if state is None:
        return OperationResult.fail('Template not found', 'not_found')
    return create_cut_sheet(state, processing_order_id, processor_id, actor=actor)


@returns_result
def submit_cut_sheet(cut_sheet_id, *, actor=None) -> OperationResult:
    """Move a draft cut sheet to submitted."""
    actor = require_actor(actor)
    cut_sheet = get_cut_sheet_for_owner(actor, cut_sheet_id)
    if cut_sheet.is_template:
        raise InvalidState('Templates cannot be submitted')
    if cut_sheet.status != CutSheetStatus.DRAFT:
        raise InvalidState(f"Cut sheet is already {cut_sheet.status}")

    def write():
        previous = {
            'status': cut_sheet.status,
            'submitted_at': cut_sheet.submitted_at.isoformat() if cut_sheet.submitted_at else None,
        }
        cut_sheet.status = CutSheetStatus.SUBMITTED
        cut_sheet.submitted_at = timezone.now()
        cut_sheet.last_modified_by_role = actor.role
        cut_sheet.last_modified_by_user_id = actor.user_id
        cut_sheet.save(update_fields=[
            'status', 'submitted_at', 'last_modified_by_role', 'last_modified_by_user_id', 'updated_at',
        ])
        new = {'status': cut_sheet.status, 'submitted_at': cut_sheet.submitted_at.isoformat()}
        record = ChangeRecord(
            change_type=ChangeType.STATUS_CHANGED,
            change_category=ChangeCategory.GENERAL,
            summary='Submitted cut sheet',
            previous_state=previous,
            new_state=new,
        )
        return record, cut_sheet

    return run_audited(cut_sheet, actor, write)


# =============================================================================
# PROCESSOR OVERLAYS
# =============================================================================

@returns_result
def update_cut_parameters(cut_sheet_id, cut_id: str, updates: dict, *, actor=None) -> OperationResult:
    """Merge parameter changes (thickness, pieces_per_package, ...) for one cut.

    The producer's item is left as submitted; the merged values live in the
    cut's modification row and are stamped with ``modified_at``.
    """
    actor = require_actor(actor)
    cut_sheet = get_cut_sheet_for_processor(actor, cut_sheet_id)
    try:
        updates = {key: value for key, value in dict(updates).items() if key != 'modified_at'}
        json.dumps(updates, cls=DjangoJSONEncoder)
    except (TypeError, ValueError):
        raise InvalidSelection('Cut parameters must be a JSON object')

    def write():
        previous = cut_sheet.processor_modifications
        modification = (
            CutModification.objects.select_for_update()
            .filter(cut_sheet=cut_sheet, cut_id=cut_id)
            .first()
        )
        now = timezone.now()
        if modification is None:
            CutModification.objects.create(
                cut_sheet=cut_sheet, cut_id=cut_id, values=updates, modified_at=now,
            )
        else:
            modification.values = {**modification.values, **updates}
            modification.modified_at = now
            modification.save(update_fields=['values', 'modified_at', 'updated_at'])
        _touch(cut_sheet, actor)
        new = cut_sheet.processor_modifications
        record = ChangeRecord(
            change_category=ChangeCategory.CUT_MODIFIED,
            summary=f"Modified {cut_id}: {', '.join(updates)}",
            previous_state={'processor_modifications': previous},
            new_state={'processor_modifications': new},
            affected_cut_id=cut_id,
        )
        return record, new[cut_id]

    return run_audited(cut_sheet, actor, write)


@returns_result
def remove_cut(cut_sheet_id, cut_id: str, cut_name: str, reason: str, *, actor=None) -> OperationResult:
    """Mark a producer's cut as removed. Removing twice is a silent success."""
    actor = require_actor(actor)
    cut_sheet = get_cut_sheet_for_processor(actor, cut_sheet_id)

    if RemovedCut.objects.filter(cut_sheet=cut_sheet, cut_id=cut_id).exists():
        logger.debug("Cut %s already removed from cut sheet %s", cut_id, cut_sheet.pk)
        return OperationResult.ok()

    def write():
        previous = cut_sheet.removed_cuts
        try:
            with transaction.atomic():
                RemovedCut.objects.create(
                    cut_sheet=cut_sheet,
                    cut_id=cut_id,
                    cut_name=cut_name,
                    reason=reason or '',
                    removed_at=timezone.now(),
                )
        except IntegrityError:
            # Concurrent removal of the same cut
            raise AlreadyRemoved(cut_id)
        _touch(cut_sheet, actor)
        new = cut_sheet.removed_cuts
        record = ChangeRecord(
            change_category=ChangeCategory.CUT_REMOVED,
            summary=f"Removed {cut_name}: {reason}",
            previous_state={'removed_cuts': previous},
            new_state={'removed_cuts': new},
            affected_cut_id=cut_id,
        )
        return record, new

    try:
        return run_audited(cut_sheet, actor, write)
    except AlreadyRemoved:
        logger.debug("Cut %s removed concurrently from cut sheet %s", cut_id, cut_sheet.pk)
        return OperationResult.ok()


@returns_result
def restore_cut(cut_sheet_id, cut_id: str, *, actor=None) -> OperationResult:
    """Drop the removal overlay for a cut. The producer's item was never touched."""
    actor = require_actor(actor)
    cut_sheet = get_cut_sheet_for_processor(actor, cut_sheet_id)

    if not RemovedCut.objects.filter(cut_sheet=cut_sheet, cut_id=cut_id).exists():
        logger.debug("Cut %s is not removed from cut sheet %s", cut_id, cut_sheet.pk)
        return OperationResult.ok()

    def write():
        previous = cut_sheet.removed_cuts
        RemovedCut.objects.filter(cut_sheet=cut_sheet, cut_id=cut_id).delete()
        _touch(cut_sheet, actor)
        new = cut_sheet.removed_cuts
        record = ChangeRecord(
            change_category=ChangeCategory.CUT_ADDED,
            summary=f"Restored {cut_id}",
            previous_state={'removed_cuts': previous},
            new_state={'removed_cuts': new},
            affected_cut_id=cut_id,
        )
        return record, new

    return run_audited(cut_sheet, actor, write)


@returns_result
def add_cut(cut_sheet_id, cut: dict, *, actor=None) -> OperationResult:
    """Add a cut the producer did not ask for.

    Args:
        cut: ``{"cut_id", "cut_name", ...}``; other keys (thickness,
            pieces_per_package, notes) are kept with the addition

    Raises (as failed results):
        AlreadyAdded: If the cut was already added to this cut sheet
    """
    actor = require_actor(actor)
    cut_sheet = get_cut_sheet_for_processor(actor, cut_sheet_id)
    cut = dict(cut)
    cut_id = cut.pop('cut_id', None)
    cut_name = cut.pop('cut_name', None)
    cut.pop('added_at', None)
    if not cut_id or not cut_name:
        raise InvalidSelection('An added cut needs cut_id and cut_name')

    if AddedCut.objects.filter(cut_sheet=cut_sheet, cut_id=cut_id).exists():
        raise AlreadyAdded(cut_id)

    def write():
        previous = cut_sheet.added_cuts
        try:
            with transaction.atomic():
                AddedCut.objects.create(
                    cut_sheet=cut_sheet,
                    cut_id=cut_id,
                    cut_name=cut_name,
                    details=cut,
                    added_at=timezone.now(),
                )
        except IntegrityError:
            raise AlreadyAdded(cut_id)
        _touch(cut_sheet, actor)
        new = cut_sheet.added_cuts
        record = ChangeRecord(
            change_category=ChangeCategory.CUT_ADDED,
            summary=f"Added {cut_name}",
            previous_state={'added_cuts': previous},
            new_state={'added_cuts': new},
            affected_cut_id=cut_id,
        )
        return record, new

    return run_audited(cut_sheet, actor, write)


@returns_result
def update_processor_notes(cut_sheet_id, notes, *, actor=None) -> OperationResult:
    actor = require_actor(actor)
    cut_sheet = get_cut_sheet_for_processor(actor, cut_sheet_id)

    def write():
        locked = CutSheet.objects.select_for_update().get(pk=cut_sheet.pk)
        previous = locked.processor_notes
        locked.processor_notes = notes
        locked.last_modified_by_role = actor.role
        locked.last_modified_by_user_id = actor.user_id
        locked.save(update_fields=[
            'processor_notes', 'last_modified_by_role', 'last_modified_by_user_id', 'updated_at',
        ])
        record = ChangeRecord(
            change_category=ChangeCategory.NOTES_UPDATED,
            summary='Updated processor notes',
            previous_state={'processor_notes': previous},
            new_state={'processor_notes': notes},
        )
        return record, notes

    return run_audited(cut_sheet, actor, write)


@returns_result
def update_hanging_weight(cut_sheet_id, weight, *, actor=None) -> OperationResult:
    actor = require_actor(actor)
    cut_sheet = get_cut_sheet_for_processor(actor, cut_sheet_id)
    if cut_sheet.is_template:
        raise InvalidState('Templates do not carry a hanging weight')
    value = parse_weight(weight)

    def write():
        locked = CutSheet.objects.select_for_update().get(pk=cut_sheet.pk)
        previous = json_number(locked.hanging_weight_lbs)
        locked.hanging_weight_lbs = value
        locked.last_modified_by_role = actor.role
        locked.last_modified_by_user_id = actor.user_id
        locked.save(update_fields=[
            'hanging_weight_lbs', 'last_modified_by_role', 'last_modified_by_user_id', 'updated_at',
        ])
        new = json_number(value)
        before = format_number(previous) if previous else 'none'
        record = ChangeRecord(
            change_category=ChangeCategory.WEIGHT_ENTERED,
            summary=f"Updated hanging weight: {before} → {format_number(new)} lbs",
            previous_state={'hanging_weight_lbs': previous},
            new_state={'hanging_weight_lbs': new},
        )
        return record, value

    return run_audited(cut_sheet, actor, write)
