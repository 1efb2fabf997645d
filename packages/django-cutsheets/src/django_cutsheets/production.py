"""Produced package ledger.

Processors record the physical packages cut from a cut sheet. Package numbers
are 1-based and counted per (cut_sheet, cut_id). Two processors numbering the
same cut at once cannot both win: the (cut_sheet, cut_id, package_number)
unique constraint rejects the second insert, which then retries with a fresh
number up to CUTSHEETS_PACKAGE_NUMBER_RETRIES times.
"""
import logging
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.db.models import Max

from .access import get_cut_sheet_for_processor, get_visible_cut_sheet
from .actors import require_actor
from .choices import ChangeCategory
from .conf import get_setting
from .diff import format_number
from .exceptions import AlreadyExists, InvalidSelection, InvalidState, NotFound, PersistenceFailure
from .history import ChangeRecord, run_audited
from .middleware import get_current_actor
from .models import CutSheet, ProducedPackage
from .results import OperationResult, returns_result
from .services import parse_weight
from .state import json_number, snapshot_package

logger = logging.getLogger(__name__)

PACKAGE_FIELDS = (
    'primal_id',
    'quantity_in_package',
    'thickness',
    'processing_style',
    'processor_added',
    'processor_notes',
    'livestock_tracking_id',
)


def _next_package_number(cut_sheet: CutSheet, cut_id: str) -> int:
    current = (
        ProducedPackage.objects.filter(cut_sheet=cut_sheet, cut_id=cut_id)
        .aggregate(highest=Max('package_number'))['highest']
    )
    return (current or 0) + 1


def _get_package(package_id) -> ProducedPackage:
    try:
        package = ProducedPackage.objects.select_related('cut_sheet').filter(pk=package_id).first()
    except (ValidationError, ValueError):
        package = None
    if package is None:
        raise NotFound('Package', package_id)
    return package


def _get_package_for_processor(actor, package_id) -> ProducedPackage:
    package = _get_package(package_id)
    try:
        get_cut_sheet_for_processor(actor, package.cut_sheet_id)
    except NotFound:
        raise NotFound('Package', package_id)
    return package


@returns_result
def create_produced_package(cut_sheet_id, data: dict, *, actor=None) -> OperationResult:
    """Record a produced package for one cut.

    Args:
        cut_sheet_id: Cut sheet the package was cut from
        data: ``cut_id`` and ``cut_name`` (required), optional
            ``package_number``, ``actual_weight_lbs``, ``quantity_in_package``,
            ``primal_id``, ``thickness``, ``processing_style``,
            ``processor_added``, ``processor_notes``, ``livestock_tracking_id``

    Returns:
        OperationResult with the new ProducedPackage as ``data``

    Usage:
        result = create_produced_package(sheet.id, {
            'cut_id': 'ribeye',
            'cut_name': 'Rib-Eye Steaks',
            'actual_weight_lbs': 1.25,
        }, actor=processor)
        result.data.package_number  # 1, then 2, 3, ... for later ribeye packages
    """
    actor = require_actor(actor)
    cut_sheet = get_cut_sheet_for_processor(actor, cut_sheet_id)
    if cut_sheet.is_template:
        raise InvalidState('Templates do not have produced packages')

    data = dict(data)
    cut_id = data.get('cut_id')
    cut_name = data.get('cut_name')
    if not cut_id or not cut_name:
        raise InvalidSelection('A package needs cut_id and cut_name')
    weight = data.get('actual_weight_lbs')
    weight = parse_weight(weight) if weight else None
    explicit_number = data.get('package_number') or None

    values = {name: data[name] for name in PACKAGE_FIELDS if data.get(name) is not None}
    values.setdefault('quantity_in_package', 1)

    def write_with(number):
        def write():
            package = ProducedPackage.objects.create(
                cut_sheet=cut_sheet,
                cut_id=cut_id,
                cut_name=cut_name,
                package_number=number,
                actual_weight_lbs=weight,
                **values,
            )
            size = f" ({format_number(weight)} lbs)" if weight else ''
            record = ChangeRecord(
                change_category=ChangeCategory.PACKAGE_CREATED,
                summary=f"Created package: {cut_name} #{number}{size}",
                previous_state=None,
                new_state=snapshot_package(package),
                changed_fields=['produced_packages'],
                affected_cut_id=cut_id,
                affected_package_id=package.id,
            )
            return record, package
        return write

    attempts = max(1, int(get_setting('PACKAGE_NUMBER_RETRIES')))
    for attempt in range(1, attempts + 1):
        number = explicit_number or _next_package_number(cut_sheet, cut_id)
        try:
            return run_audited(cut_sheet, actor, write_with(number))
        except IntegrityError:
            if explicit_number:
                raise AlreadyExists(f"Package {cut_name} #{number} already exists")
            logger.warning(
                "Package number %s for %s on cut sheet %s was taken (attempt %s of %s)",
                number, cut_id, cut_sheet.pk, attempt, attempts,
            )
    raise PersistenceFailure(f"Could not assign a package number for {cut_name}")


@returns_result
def update_package_weight(package_id, weight, *, actor=None) -> OperationResult:
    actor = require_actor(actor)
    package = _get_package_for_processor(actor, package_id)
    value = parse_weight(weight)

    def write():
        locked = ProducedPackage.objects.select_for_update().get(pk=package.pk)
        previous = json_number(locked.actual_weight_lbs)
        locked.actual_weight_lbs = value
        locked.save(update_fields=['actual_weight_lbs', 'updated_at'])
        new = json_number(value)
        before = format_number(previous) if previous else 'none'
        record = ChangeRecord(
            change_category=ChangeCategory.WEIGHT_ENTERED,
            summary=f"Updated {locked.cut_name} #{locked.package_number} weight: {before} → {format_number(new)} lbs",
            previous_state={'actual_weight_lbs': previous},
            new_state={'actual_weight_lbs': new},
            affected_cut_id=locked.cut_id,
            affected_package_id=locked.pk,
        )
        return record, locked

    return run_audited(package.cut_sheet, actor, write)


@returns_result
def delete_package(package_id, *, actor=None) -> OperationResult:
    """Delete a package. Its full prior row is kept in the history entry."""
    actor = require_actor(actor)
    package = _get_package_for_processor(actor, package_id)
    cut_sheet = package.cut_sheet

    def write():
        previous = snapshot_package(package)
        ProducedPackage.objects.filter(pk=package.pk).delete()
        record = ChangeRecord(
            change_category=ChangeCategory.GENERAL,
            summary=f"Deleted package: {package.cut_name} #{package.package_number}",
            previous_state=previous,
            new_state={},
            changed_fields=['produced_packages'],
            affected_cut_id=package.cut_id,
            affected_package_id=package.pk,
        )
        return record, None

    return run_audited(cut_sheet, actor, write)


def get_produced_packages(cut_sheet_id, *, actor=None) -> List[ProducedPackage]:
    """Packages of a cut sheet ordered by cut and package number."""
    actor = actor or get_current_actor()
    if get_visible_cut_sheet(actor, cut_sheet_id) is None:
        logger.debug("Packages of cut sheet %s not visible to %r", cut_sheet_id, actor)
        return []
    return list(ProducedPackage.objects.filter(cut_sheet_id=cut_sheet_id).order_by('cut_id', 'package_number'))


def get_package(package_id, *, actor=None) -> Optional[ProducedPackage]:
    actor = actor or get_current_actor()
    try:
        package = _get_package(package_id)
    except NotFound:
        return None
    if get_visible_cut_sheet(actor, package.cut_sheet_id) is None:
        return None
    return package
