"""Processor cut configuration: which taxonomy options a processor offers.

A processor without a stored row gets DefaultCutConfig (every animal and
every cut enabled). Updates are field-presence merges: a field left UNSET in
a CutConfigPatch keeps its stored value, while False, 0, [] and None are
explicit values.

Concurrent toggle_cut/upsert_config calls for one processor are
last-write-wins; nothing here locks the row.

Usage:
    from django_cutsheets.config import get_config, upsert_config, CutConfigPatch

    config = get_config(processor_id)
    result = upsert_config(processor_id, CutConfigPatch(min_hanging_weight=300), actor=actor)
"""
import logging
from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Tuple

from django.db import IntegrityError, transaction

from .actors import require_actor
from .choices import AnimalType
from .exceptions import InvalidSelection, NotAuthorized
from .middleware import get_current_actor
from .models import ProcessorCutConfig
from .results import OperationResult, returns_result
from .taxonomy import AnimalSchema, CutChoice, Primal, get_animal_schema

logger = logging.getLogger(__name__)

DISABLED_REASON = 'This option is not offered by this processor'


class _Unset:
    """Marker for a patch field that was not supplied."""

    def __repr__(self):
        return 'UNSET'

    def __bool__(self):
        return False


UNSET: Any = _Unset()


# =============================================================================
# CONFIG VALUES
# =============================================================================

@dataclass(frozen=True)
class CutConfig:
    processor_id: str
    enabled_animals: Tuple[str, ...] = tuple(AnimalType.values)
    disabled_cuts: Tuple[str, ...] = ()
    disabled_sausage_flavors: Tuple[str, ...] = ()
    custom_cuts: Tuple[dict, ...] = ()
    default_templates: Tuple[dict, ...] = ()
    processing_fees: dict = field(default_factory=dict)
    min_hanging_weight: Optional[int] = None
    max_hanging_weight: Optional[int] = None
    producer_notes: Optional[str] = None

    is_default = False

    def as_dict(self) -> dict:
        return {
            'processor_id': self.processor_id,
            'enabled_animals': list(self.enabled_animals),
            'disabled_cuts': list(self.disabled_cuts),
            'disabled_sausage_flavors': list(self.disabled_sausage_flavors),
            'custom_cuts': [dict(cut) for cut in self.custom_cuts],
            'default_templates': [dict(t) for t in self.default_templates],
            'processing_fees': dict(self.processing_fees),
            'min_hanging_weight': self.min_hanging_weight,
            'max_hanging_weight': self.max_hanging_weight,
            'producer_notes': self.producer_notes,
        }


@dataclass(frozen=True)
class ExplicitCutConfig(CutConfig):
    """Configuration stored by the processor."""

    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, row: ProcessorCutConfig) -> "ExplicitCutConfig":
        return cls(
            processor_id=row.processor_id,
            enabled_animals=tuple(row.enabled_animals or ()),
            disabled_cuts=tuple(row.disabled_cuts or ()),
            disabled_sausage_flavors=tuple(row.disabled_sausage_flavors or ()),
            custom_cuts=tuple(row.custom_cuts or ()),
            default_templates=tuple(row.default_templates or ()),
            processing_fees=dict(row.processing_fees or {}),
            min_hanging_weight=row.min_hanging_weight,
            max_hanging_weight=row.max_hanging_weight,
            producer_notes=row.producer_notes,
            updated_at=row.updated_at,
        )


@dataclass(frozen=True)
class DefaultCutConfig(CutConfig):
    """Implicit configuration of a processor that never saved one."""

    is_default = True


@dataclass(frozen=True)
class CutConfigPatch:
    """Partial configuration update. Fields left UNSET are not touched."""

    enabled_animals: Any = UNSET
    disabled_cuts: Any = UNSET
    disabled_sausage_flavors: Any = UNSET
    custom_cuts: Any = UNSET
    default_templates: Any = UNSET
    processing_fees: Any = UNSET
    min_hanging_weight: Any = UNSET
    max_hanging_weight: Any = UNSET
    producer_notes: Any = UNSET

    @classmethod
    def from_mapping(cls, data: dict) -> "CutConfigPatch":
        """Patch from a plain dict; keys present in ``data`` are supplied."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidSelection(f"Unknown config fields: {', '.join(sorted(unknown))}")
        return cls(**data)

    def supplied(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


def _normalize_fees(fees) -> dict:
    normalized = {}
    for cut_id, amount in (fees or {}).items():
        try:
            normalized[cut_id] = str(Decimal(str(amount)))
        except InvalidOperation:
            raise InvalidSelection(f"Invalid processing fee for '{cut_id}': {amount!r}")
    return normalized


def _clean_patch_values(values: dict) -> dict:
    cleaned = dict(values)
    if 'enabled_animals' in cleaned:
        animals = list(cleaned['enabled_animals'] or [])
        unknown = [a for a in animals if a not in AnimalType.values]
        if unknown:
            raise InvalidSelection(f"Unknown animal types: {', '.join(unknown)}")
        cleaned['enabled_animals'] = animals
    for key in ('disabled_cuts', 'disabled_sausage_flavors', 'custom_cuts', 'default_templates'):
        if key in cleaned:
            cleaned[key] = list(cleaned[key] or [])
    if 'processing_fees' in cleaned:
        cleaned['processing_fees'] = _normalize_fees(cleaned['processing_fees'])
    for key in ('min_hanging_weight', 'max_hanging_weight'):
        if cleaned.get(key) is not None:
            cleaned[key] = _clean_weight_limit(key, cleaned[key])
    return cleaned


def _clean_weight_limit(key: str, value) -> int:
    try:
        limit = int(Decimal(str(value)))
    except (InvalidOperation, ValueError, OverflowError):
        raise InvalidSelection(f"Invalid {key.replace('_', ' ')}: {value!r}")
    if isinstance(value, bool) or limit < 0:
        raise InvalidSelection(f"Invalid {key.replace('_', ' ')}: {value!r}")
    return limit


# =============================================================================
# READ / WRITE
# =============================================================================

def get_config(processor_id: Optional[str] = None, *, actor=None) -> Optional[CutConfig]:
    """Return the processor's configuration, or the all-enabled default.

    Without ``processor_id`` the acting processor's own configuration is
    returned; None when there is no acting processor.
    """
    if processor_id is None:
        actor = actor or get_current_actor()
        if actor is None or not actor.is_processor:
            return None
        processor_id = actor.organization_id
    row = ProcessorCutConfig.objects.filter(processor_id=processor_id).first()
    if row is None:
        return DefaultCutConfig(processor_id=processor_id)
    return ExplicitCutConfig.from_model(row)


def _ensure_can_configure(actor, processor_id: str) -> None:
    if not actor.is_processor or actor.organization_id != str(processor_id):
        raise NotAuthorized('Only processors can configure cut options')


def _get_or_create_row(processor_id: str) -> ProcessorCutConfig:
    try:
        with transaction.atomic():
            row, _ = ProcessorCutConfig.objects.get_or_create(
                processor_id=processor_id,
                defaults={'enabled_animals': list(AnimalType.values)},
            )
            return row
    except IntegrityError:
        # Race condition: another request created it
        return ProcessorCutConfig.objects.get(processor_id=processor_id)


@returns_result
def upsert_config(processor_id: str, patch, *, actor=None) -> OperationResult:
    """Create or merge the processor's configuration.

    Args:
        processor_id: Processor organization id; must be the actor's own
        patch: CutConfigPatch, or a dict whose present keys are applied
        actor: Acting principal (defaults to the request's actor)

    Returns:
        OperationResult with the merged ExplicitCutConfig as ``data``
    """
    actor = require_actor(actor)
    _ensure_can_configure(actor, processor_id)

    if not isinstance(patch, CutConfigPatch):
        try:
            patch = dict(patch)
        except (TypeError, ValueError):
            raise InvalidSelection('Config update must be a mapping')
        patch = CutConfigPatch.from_mapping(patch)
    try:
        values = _clean_patch_values(patch.supplied())
    except (TypeError, ValueError, AttributeError):
        raise InvalidSelection('Malformed config update')

    row = _get_or_create_row(processor_id)
    if values:
        for name, value in values.items():
            setattr(row, name, value)
        row.save(update_fields=[*values.keys(), 'updated_at'])

    logger.info(
        "Processor %s cut config updated by user %s: %s",
        processor_id, actor.user_id, ', '.join(sorted(values)) or 'no changes',
    )
    return OperationResult.ok(ExplicitCutConfig.from_model(row))


def toggle_cut(processor_id: str, cut_id: str, *, actor=None) -> OperationResult:
    """Flip whether ``cut_id`` is disabled. Read-modify-write, last write wins."""
    disabled = list(get_config(processor_id).disabled_cuts)
    if cut_id in disabled:
        disabled = [c for c in disabled if c != cut_id]
    else:
        disabled.append(cut_id)
    return upsert_config(processor_id, CutConfigPatch(disabled_cuts=disabled), actor=actor)


@returns_result
def disable_cut(processor_id: str, cut_id: str, *, actor=None) -> OperationResult:
    actor = require_actor(actor)
    _ensure_can_configure(actor, processor_id)
    config = get_config(processor_id)
    if cut_id in config.disabled_cuts:
        logger.debug("Cut %s already disabled for processor %s", cut_id, processor_id)
        return OperationResult.ok(config)
    return upsert_config(
        processor_id,
        CutConfigPatch(disabled_cuts=[*config.disabled_cuts, cut_id]),
        actor=actor,
    )


def enable_cut(processor_id: str, cut_id: str, *, actor=None) -> OperationResult:
    disabled = [c for c in get_config(processor_id).disabled_cuts if c != cut_id]
    return upsert_config(processor_id, CutConfigPatch(disabled_cuts=disabled), actor=actor)


def update_enabled_animals(processor_id: str, animals: List[str], *, actor=None) -> OperationResult:
    return upsert_config(processor_id, CutConfigPatch(enabled_animals=list(animals)), actor=actor)


def update_producer_notes(processor_id: str, notes: Optional[str], *, actor=None) -> OperationResult:
    return upsert_config(processor_id, CutConfigPatch(producer_notes=notes), actor=actor)


# =============================================================================
# FILTERING THE TAXONOMY
# =============================================================================

@dataclass(frozen=True)
class FilteredCut:
    cut: CutChoice
    disabled: bool = False
    disabled_reason: Optional[str] = None

    @property
    def id(self) -> str:
        return self.cut.id

    @property
    def name(self) -> str:
        return self.cut.name


@dataclass(frozen=True)
class FilteredPrimal:
    primal: Primal
    choices: Tuple[FilteredCut, ...]
    sub_sections: Tuple['FilteredPrimal', ...] = ()

    @property
    def id(self) -> str:
        return self.primal.id

    def has_enabled_cuts(self) -> bool:
        return any(not c.disabled for c in self.choices) or any(
            sub.has_enabled_cuts() for sub in self.sub_sections
        )


@dataclass(frozen=True)
class FilteredAnimalSchema:
    schema: AnimalSchema
    primals: Tuple[FilteredPrimal, ...]

    def enabled_cut_ids(self) -> List[str]:
        ids = []
        for primal in self.primals:
            ids.extend(c.id for c in primal.choices if not c.disabled)
            for sub in primal.sub_sections:
                ids.extend(c.id for c in sub.choices if not c.disabled)
        return ids


def _filter_primals(primals, disabled_cuts) -> Tuple[FilteredPrimal, ...]:
    result = []
    for primal in primals:
        filtered = FilteredPrimal(
            primal=primal,
            choices=tuple(
                FilteredCut(
                    cut=cut,
                    disabled=cut.id in disabled_cuts,
                    disabled_reason=DISABLED_REASON if cut.id in disabled_cuts else None,
                )
                for cut in primal.choices
            ),
            sub_sections=_filter_primals(primal.sub_sections, disabled_cuts),
        )
        # Only include primals that still offer something
        if filtered.has_enabled_cuts():
            result.append(filtered)
    return tuple(result)


def apply_processor_config(animal_type: str, config: Optional[CutConfig]) -> Optional[FilteredAnimalSchema]:
    """Taxonomy for ``animal_type`` with the processor's disabled cuts marked.

    Returns None for an unknown animal or one the processor does not accept.
    """
    schema = get_animal_schema(animal_type)
    if schema is None:
        return None
    if config is None:
        config = DefaultCutConfig(processor_id='')
    if animal_type not in config.enabled_animals:
        return None
    return FilteredAnimalSchema(
        schema=schema,
        primals=_filter_primals(schema.primals, set(config.disabled_cuts)),
    )


def get_enabled_cut_ids(animal_type: str, config: Optional[CutConfig]) -> List[str]:
    filtered = apply_processor_config(animal_type, config)
    return filtered.enabled_cut_ids() if filtered else []


def is_cut_enabled(cut_id: str, config: Optional[CutConfig]) -> bool:
    if config is None:
        return True
    return cut_id not in config.disabled_cuts


def get_custom_cuts(config: Optional[CutConfig]) -> List[CutChoice]:
    if config is None:
        return []
    return [
        CutChoice(
            id=cut['id'],
            name=cut.get('name', cut['id']),
            cut_type=cut.get('type', ''),
            additional_fee=bool(cut.get('additional_fee', False)),
            note=cut.get('note') or '',
        )
        for cut in config.custom_cuts
        if cut.get('id')
    ]


def get_producer_notes(config: Optional[CutConfig]) -> Optional[str]:
    return (config.producer_notes or None) if config else None


@dataclass(frozen=True)
class WeightRequirements:
    min: Optional[int]
    max: Optional[int]


def get_weight_requirements(config: Optional[CutConfig]) -> WeightRequirements:
    if config is None:
        return WeightRequirements(min=None, max=None)
    return WeightRequirements(
        min=config.min_hanging_weight or None,
        max=config.max_hanging_weight or None,
    )


def is_weight_within_limits(config: Optional[CutConfig], weight) -> bool:
    """Whether a hanging weight satisfies the processor's min/max."""
    limits = get_weight_requirements(config)
    weight = Decimal(str(weight))
    if limits.min is not None and weight < limits.min:
        return False
    if limits.max is not None and weight > limits.max:
        return False
    return True


def fee_for(config: Optional[CutConfig], cut_id: str) -> Optional[Decimal]:
    """Processing fee the processor charges for a cut, if any."""
    if config is None or cut_id not in config.processing_fees:
        return None
    return Decimal(str(config.processing_fees[cut_id]))
