"""Cut selection validation against the taxonomy constraints.

Pure functions with no database access.

Rule types:
- exclusive_choice: only one option from a primal/sub-section
- excludes: hard conflict, selecting A disables B (T-bone vs NY Strip)
- requires: must be selected together (NY Strip requires Filet)
- conflicts_with: soft conflict, allowed but yield is shared (warning)
- reduces_yield: comes from the same area as another cut (warning)

Cut ids that are not in the animal's taxonomy (processor custom cuts) are
ignored here; callers decide whether they are acceptable.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .taxonomy import CutChoice, all_cuts, locate_cut


@dataclass(frozen=True)
class SelectionError:
    type: str
    cut_id: str
    cut_name: str
    conflicting_cut_id: str
    conflicting_cut_name: str
    message: str


@dataclass(frozen=True)
class SelectionWarning:
    type: str
    cut_id: str
    cut_name: str
    affected_cut_id: str
    affected_cut_name: str
    message: str


@dataclass(frozen=True)
class DisabledOption:
    cut_id: str
    cut_name: str
    reason: str
    disabled_by: str


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[SelectionError] = field(default_factory=list)
    warnings: List[SelectionWarning] = field(default_factory=list)
    disabled_options: List[DisabledOption] = field(default_factory=list)


@dataclass(frozen=True)
class CutAvailability:
    cut_id: str
    cut_name: str
    available: bool
    reason: Optional[str] = None
    disabled_by: Optional[str] = None


@dataclass
class NormalizedSelections:
    selections: List[str]
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)


def _cut_map(animal_type: str) -> Dict[str, CutChoice]:
    return {cut.id: cut for cut in all_cuts(animal_type)}


def _exclusive_groups(animal_type: str, cut_id: str):
    """Yield the exclusive-choice groups (sub-section first) containing a cut."""
    location = locate_cut(cut_id)
    if location is None or location.animal_type != animal_type:
        return
    if location.sub_section is not None and location.sub_section.exclusive_choice:
        yield location.sub_section
    if location.primal.exclusive_choice:
        yield location.primal


def _check_exclusive_choice(animal_type, cut_id, selected_ids) -> Optional[SelectionError]:
    for group in _exclusive_groups(animal_type, cut_id):
        others = [c for c in group.choices if c.id != cut_id and c.id in selected_ids]
        if others:
            current = next((c for c in group.choices if c.id == cut_id), None)
            name = current.name if current else cut_id
            return SelectionError(
                type='exclusive_choice',
                cut_id=cut_id,
                cut_name=name,
                conflicting_cut_id=others[0].id,
                conflicting_cut_name=others[0].name,
                message=(
                    f'Only one option can be selected from "{group.display_name}". '
                    f'Choose either "{name}" or "{others[0].name}".'
                ),
            )
    return None


def _disabled_reason(animal_type, cut_id, selected_ids, cut_map) -> Optional[DisabledOption]:
    if cut_id in selected_ids:
        return None
    cut = cut_map.get(cut_id)
    if cut is None:
        return None

    for selected_id in selected_ids:
        selected = cut_map.get(selected_id)
        if selected is not None and cut_id in selected.excludes:
            return DisabledOption(
                cut_id=cut_id,
                cut_name=cut.name,
                reason=f'Disabled because "{selected.name}" is selected',
                disabled_by=selected_id,
            )

    for group in _exclusive_groups(animal_type, cut_id):
        other = next((c for c in group.choices if c.id != cut_id and c.id in selected_ids), None)
        if other is not None:
            return DisabledOption(
                cut_id=cut_id,
                cut_name=cut.name,
                reason=f'Only one option from "{group.display_name}" can be selected',
                disabled_by=other.id,
            )
    return None


def validate_selections(animal_type: str, cut_ids: Iterable[str]) -> ValidationResult:
    """Validate a set of selected cut ids for one animal.

    Args:
        animal_type: beef, pork, lamb or goat
        cut_ids: Selected cut ids, in selection order

    Returns:
        ValidationResult with errors, warnings and the options that the
        current selection disables. An unknown animal is never valid.
    """
    cut_map = _cut_map(animal_type)
    if not cut_map:
        return ValidationResult(is_valid=False)

    selections = list(cut_ids)
    # Ordered set so iteration below is deterministic
    selected_ids = list(dict.fromkeys(selections))
    selected = set(selected_ids)
    errors: List[SelectionError] = []
    warnings: List[SelectionWarning] = []

    for cut_id in selections:
        cut = cut_map.get(cut_id)
        if cut is None:
            continue

        exclusive_error = _check_exclusive_choice(animal_type, cut_id, selected)
        if exclusive_error:
            errors.append(exclusive_error)

        for excluded_id in cut.excludes:
            excluded = cut_map.get(excluded_id)
            if excluded_id in selected and excluded is not None:
                errors.append(SelectionError(
                    type='excludes',
                    cut_id=cut.id,
                    cut_name=cut.name,
                    conflicting_cut_id=excluded_id,
                    conflicting_cut_name=excluded.name,
                    message=(
                        f'Cannot select both "{cut.name}" and "{excluded.name}" - '
                        f'they come from the same section of the animal.'
                    ),
                ))

        for required_id in cut.requires:
            required = cut_map.get(required_id)
            if required_id not in selected and required is not None:
                errors.append(SelectionError(
                    type='requires',
                    cut_id=cut.id,
                    cut_name=cut.name,
                    conflicting_cut_id=required_id,
                    conflicting_cut_name=required.name,
                    message=(
                        f'"{cut.name}" requires "{required.name}" to also be selected '
                        f'(they are separated from the same section).'
                    ),
                ))

        for conflict_id in cut.conflicts_with:
            conflict = cut_map.get(conflict_id)
            if conflict_id not in selected or conflict is None:
                continue
            # Report each soft conflict from one direction only
            if any(w.cut_id == conflict_id and w.affected_cut_id == cut.id for w in warnings):
                continue
            warnings.append(SelectionWarning(
                type='conflicts_with',
                cut_id=cut.id,
                cut_name=cut.name,
                affected_cut_id=conflict_id,
                affected_cut_name=conflict.name,
                message=(
                    f'Both "{cut.name}" and "{conflict.name}" selected - '
                    f'this may reduce the amount of each you receive.'
                ),
            ))

        if cut.reduces_yield:
            affected = cut_map.get(cut.reduces_yield)
            if affected is not None and cut.reduces_yield in selected:
                warnings.append(SelectionWarning(
                    type='reduces_yield',
                    cut_id=cut.id,
                    cut_name=cut.name,
                    affected_cut_id=affected.id,
                    affected_cut_name=affected.name,
                    message=(
                        f'"{cut.name}" comes from the same area as "{affected.name}" '
                        f'and will reduce the yield.'
                    ),
                ))

    disabled = []
    for cut in cut_map.values():
        option = _disabled_reason(animal_type, cut.id, selected_ids, cut_map)
        if option:
            disabled.append(option)

    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        disabled_options=disabled,
    )


def get_cut_availability(animal_type: str, cut_ids: Iterable[str]) -> List[CutAvailability]:
    """Availability of every cut of an animal given the current selection."""
    cut_map = _cut_map(animal_type)
    selected_ids = list(dict.fromkeys(cut_ids))
    result = []
    for cut in cut_map.values():
        option = _disabled_reason(animal_type, cut.id, selected_ids, cut_map)
        result.append(CutAvailability(
            cut_id=cut.id,
            cut_name=cut.name,
            available=option is None,
            reason=option.reason if option else None,
            disabled_by=option.disabled_by if option else None,
        ))
    return result


def get_would_disable(animal_type: str, cut_id: str) -> List[DisabledOption]:
    """Cuts that selecting ``cut_id`` would disable."""
    cut_map = _cut_map(animal_type)
    cut = cut_map.get(cut_id)
    if cut is None:
        return []

    would_disable = []
    for excluded_id in cut.excludes:
        excluded = cut_map.get(excluded_id)
        if excluded is not None:
            would_disable.append(DisabledOption(
                cut_id=excluded_id,
                cut_name=excluded.name,
                reason=f'Cannot be selected with "{cut.name}"',
                disabled_by=cut_id,
            ))

    for group in _exclusive_groups(animal_type, cut_id):
        for other in group.choices:
            if other.id != cut_id:
                would_disable.append(DisabledOption(
                    cut_id=other.id,
                    cut_name=other.name,
                    reason=f'Only one option from "{group.display_name}" allowed',
                    disabled_by=cut_id,
                ))
    return would_disable


def can_add_cut(animal_type: str, cut_id: str, cut_ids: Iterable[str]) -> CutAvailability:
    """Whether ``cut_id`` can be added to the current selection."""
    for availability in get_cut_availability(animal_type, cut_ids):
        if availability.cut_id == cut_id:
            return availability
    return CutAvailability(cut_id=cut_id, cut_name=cut_id, available=False, reason='Cut not found')


def get_required_cuts(animal_type: str, cut_id: str) -> List[CutChoice]:
    cut_map = _cut_map(animal_type)
    cut = cut_map.get(cut_id)
    if cut is None:
        return []
    return [cut_map[required_id] for required_id in cut.requires if required_id in cut_map]


def normalize_selections(animal_type: str, cut_ids: Iterable[str]) -> NormalizedSelections:
    """Add required pairs, then drop later selections that conflict with earlier ones."""
    cut_map = _cut_map(animal_type)
    current = list(cut_ids)
    added: List[str] = []
    messages: List[str] = []

    index = 0
    while index < len(current):
        cut = cut_map.get(current[index])
        if cut is not None:
            for required_id in cut.requires:
                if required_id not in current:
                    current.append(required_id)
                    added.append(required_id)
                    required = cut_map.get(required_id)
                    required_name = required.name if required else required_id
                    messages.append(f'Added "{required_name}" (required by "{cut.name}")')
        index += 1

    to_remove: List[str] = []
    for position, cut_id in enumerate(current):
        cut = cut_map.get(cut_id)
        if cut is None:
            continue
        for excluded_id in cut.excludes:
            if excluded_id in current and current.index(excluded_id) > position:
                if excluded_id not in to_remove:
                    to_remove.append(excluded_id)
                excluded = cut_map.get(excluded_id)
                excluded_name = excluded.name if excluded else excluded_id
                messages.append(f'Removed "{excluded_name}" (conflicts with "{cut.name}")')

    return NormalizedSelections(
        selections=[cut_id for cut_id in current if cut_id not in to_remove],
        added=added,
        removed=to_remove,
        messages=messages,
    )
