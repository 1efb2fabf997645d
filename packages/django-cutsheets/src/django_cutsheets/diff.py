"""Human-readable field diffs for cut sheet history entries.

Values are treated as JSON (None, bool, number, string, list, dict). Every
function here is total: unexpected values fall back to a JSON dump and
nothing raises.

Usage:
    from django_cutsheets.diff import generate_diff

    for change in generate_diff(entry):
        print(f"{change.label}: {change.before} -> {change.after}")
"""
import json
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Optional

FIELD_LABELS = {
    'thickness': 'Thickness',
    'pieces_per_package': 'Pieces per Package',
    'processor_notes': 'Processor Notes',
    'processor_modifications': 'Cut Modifications',
    'removed_cuts': 'Removed Cuts',
    'added_cuts': 'Added Cuts',
    'hanging_weight_lbs': 'Hanging Weight',
    'final_weight_lbs': 'Final Weight',
    'actual_weight_lbs': 'Package Weight',
    'produced_packages': 'Produced Packages',
}


@dataclass(frozen=True)
class FieldDiff:
    field: str
    label: str
    before: Optional[str]
    after: Optional[str]


def format_field_label(field: str) -> str:
    """Label from the fixed table, else snake_case -> Title Case."""
    if field in FIELD_LABELS:
        return FIELD_LABELS[field]
    return ' '.join(word[:1].upper() + word[1:] for word in str(field).split('_'))


def format_number(value) -> str:
    """Render a number the way it reads in a summary: 650.0 -> '650', 12.5 -> '12.5'."""
    if isinstance(value, Decimal):
        value = float(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _dump(value) -> str:
    try:
        return json.dumps(value, separators=(',', ':'), ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return repr(value)


def _canonical(value) -> str:
    try:
        return json.dumps(value, sort_keys=True, default=str)
    except (TypeError, ValueError):
        return repr(value)


def _item_name(item) -> str:
    if isinstance(item, Mapping):
        name = item.get('cut_name') or item.get('name')
        if name:
            return name if isinstance(name, str) else format_value(name)
    return _dump(item)


def _join_item(item) -> str:
    """One element of a list of primitives: true/false, '' for null, nested lists comma-joined."""
    if item is None:
        return ''
    if isinstance(item, bool):
        return 'true' if item else 'false'
    if isinstance(item, str):
        return item
    if isinstance(item, (int, float, Decimal)):
        return format_number(item)
    if isinstance(item, (list, tuple)):
        return ','.join(_join_item(inner) for inner in item)
    return _dump(item)


def format_value(value: Any) -> Optional[str]:
    """Format one JSON value for display. None stays None."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, (int, float, Decimal)):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        if not value:
            return 'None'
        if isinstance(value[0], Mapping):
            return ', '.join(_item_name(item) for item in value)
        return ', '.join(_join_item(item) for item in value)
    if isinstance(value, Mapping):
        parts = [
            f"{format_field_label(key)}: {format_value(item)}"
            for key, item in value.items()
            if item is not None
        ]
        return ', '.join(parts) or 'Empty'
    return _dump(value)


def _as_state(state) -> dict:
    if state is None:
        return {}
    if isinstance(state, Mapping):
        return dict(state)
    return {'value': state}


def generate_diff(entry) -> List[FieldDiff]:
    """Field-level diffs between an entry's previous_state and new_state.

    Args:
        entry: A CutSheetHistory instance, or any mapping/object with
            ``previous_state`` and ``new_state``

    Returns:
        One FieldDiff per key whose values differ, in first-seen key order
        (previous_state keys first). Absent and null are the same value.
    """
    if isinstance(entry, Mapping):
        previous, new = entry.get('previous_state'), entry.get('new_state')
    else:
        previous = getattr(entry, 'previous_state', None)
        new = getattr(entry, 'new_state', None)

    previous, new = _as_state(previous), _as_state(new)
    keys = list(dict.fromkeys([*previous.keys(), *new.keys()]))

    diffs = []
    for key in keys:
        before, after = previous.get(key), new.get(key)
        if _canonical(before) == _canonical(after):
            continue
        diffs.append(FieldDiff(
            field=key,
            label=format_field_label(key),
            before=format_value(before),
            after=format_value(after),
        ))
    return diffs
