"""Editable cut sheet state and its mapping to and from stored rows.

CutSheetState is what a producer builds before creating a cut sheet or
saving a template, and what load_template returns.
"""
from dataclasses import asdict, dataclass, field, fields
from decimal import Decimal
from typing import Dict, List, Optional

from .choices import ORGAN_FIELDS, AnimalType
from .conf import get_setting
from .exceptions import InvalidSelection


@dataclass
class CutSelection:
    cut_id: str
    cut_name: str = ''
    category: str = ''
    thickness: Optional[str] = None
    weight_lbs: Optional[float] = None
    pieces_per_package: int = 2
    notes: Optional[str] = None


@dataclass
class SausageSelection:
    flavor: str
    pounds: float


@dataclass
class OrganSelections:
    liver: bool = False
    heart: bool = False
    tongue: bool = False
    kidneys: bool = False
    oxtail: bool = False
    bones: bool = False


@dataclass
class CutSheetState:
    animal_type: str
    hanging_weight: Optional[float] = None
    selected_cuts: Dict[str, CutSelection] = field(default_factory=dict)
    ground_type: Optional[str] = None
    ground_package_weight: float = 1
    patty_size: Optional[str] = None
    sausages: List[SausageSelection] = field(default_factory=list)
    organs: OrganSelections = field(default_factory=OrganSelections)
    keep_stew_meat: bool = False
    keep_short_ribs: bool = False
    keep_soup_bones: bool = False
    bacon_or_belly: str = 'bacon'
    ham_preference: str = 'roast'
    shoulder_preference: str = 'roast'
    keep_jowls: bool = False
    keep_fat_back: bool = False
    keep_lard_fat: bool = False
    special_instructions: str = ''

    @property
    def is_pork(self) -> bool:
        return self.animal_type == AnimalType.PORK

    def cut_ids(self) -> List[str]:
        return list(self.selected_cuts.keys())

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CutSheetState":
        """Build a state from its dict form.

        Raises:
            InvalidSelection: On unknown keys or values of the wrong shape
        """
        try:
            data = dict(data)
            selected = data.pop('selected_cuts', None) or {}
            if isinstance(selected, dict):
                selected = selected.values()
            data['selected_cuts'] = {}
            for cut in selected:
                selection = cut if isinstance(cut, CutSelection) else _build(CutSelection, cut, 'cut')
                data['selected_cuts'][selection.cut_id] = selection
            data['sausages'] = [
                s if isinstance(s, SausageSelection) else _build(SausageSelection, s, 'sausage')
                for s in data.pop('sausages', None) or []
            ]
            organs = data.pop('organs', None) or {}
            if not isinstance(organs, OrganSelections):
                organs = _build(OrganSelections, organs, 'organ')
            data['organs'] = organs
            return _build(cls, data, 'cut sheet')
        except (TypeError, ValueError):
            raise InvalidSelection('Malformed cut sheet state')


def _build(klass, values, what: str):
    """Instantiate a state dataclass, rejecting keys it does not define."""
    values = dict(values)
    unknown = set(values) - {f.name for f in fields(klass)}
    if unknown:
        raise InvalidSelection(f"Unknown {what} fields: {', '.join(sorted(unknown))}")
    return klass(**values)


def json_number(value):
    """JSON-native number for a Decimal/None column value."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def sheet_fields_from_state(state: CutSheetState, *, template: bool = False) -> dict:
    """Model field values for a CutSheet built from ``state``.

    Templates never carry a hanging weight; pork preferences are null for
    other animals.
    """
    values = {
        'animal_type': state.animal_type,
        'hanging_weight_lbs': None if template else state.hanging_weight,
        'ground_type': state.ground_type,
        'ground_package_weight_lbs': state.ground_package_weight,
        'patty_size': state.patty_size,
        'keep_stew_meat': state.keep_stew_meat,
        'keep_short_ribs': state.keep_short_ribs,
        'keep_soup_bones': state.keep_soup_bones,
        'bacon_or_belly': state.bacon_or_belly if state.is_pork else None,
        'ham_preference': state.ham_preference if state.is_pork else None,
        'shoulder_preference': state.shoulder_preference if state.is_pork else None,
        'keep_jowls': state.keep_jowls,
        'keep_fat_back': state.keep_fat_back,
        'keep_lard_fat': state.keep_lard_fat,
        'special_instructions': state.special_instructions or None,
    }
    for organ in ORGAN_FIELDS:
        values[f'keep_{organ}'] = getattr(state.organs, organ)
    return values


def state_from_sheet(sheet) -> CutSheetState:
    """Fresh draft state from a stored cut sheet (used for templates)."""
    default_pieces = get_setting('DEFAULT_PIECES_PER_PACKAGE')
    selected = {}
    for item in sheet.items.all():
        selected[item.cut_id] = CutSelection(
            cut_id=item.cut_id,
            cut_name=item.cut_name,
            category=item.cut_category,
            thickness=item.thickness or None,
            weight_lbs=json_number(item.weight_lbs) or None,
            pieces_per_package=item.pieces_per_package or default_pieces,
        )

    return CutSheetState(
        animal_type=sheet.animal_type,
        hanging_weight=None,
        selected_cuts=selected,
        ground_type=sheet.ground_type,
        ground_package_weight=json_number(sheet.ground_package_weight_lbs) or 1,
        patty_size=sheet.patty_size,
        sausages=[SausageSelection(s.flavor, json_number(s.pounds)) for s in sheet.sausages.all()],
        organs=OrganSelections(**{organ: getattr(sheet, f'keep_{organ}') for organ in ORGAN_FIELDS}),
        keep_stew_meat=sheet.keep_stew_meat,
        keep_short_ribs=sheet.keep_short_ribs,
        keep_soup_bones=sheet.keep_soup_bones,
        bacon_or_belly=sheet.bacon_or_belly or 'bacon',
        ham_preference=sheet.ham_preference or 'roast',
        shoulder_preference=sheet.shoulder_preference or 'roast',
        keep_jowls=sheet.keep_jowls,
        keep_fat_back=sheet.keep_fat_back,
        keep_lard_fat=sheet.keep_lard_fat,
        special_instructions=sheet.special_instructions or '',
    )


SNAPSHOT_FIELDS = (
    'processing_order_id',
    'producer_id',
    'processor_id',
    'is_template',
    'template_name',
    'animal_type',
    'status',
    'hanging_weight_lbs',
    'ground_type',
    'ground_package_weight_lbs',
    'patty_size',
) + tuple(f'keep_{organ}' for organ in ORGAN_FIELDS) + (
    'keep_stew_meat',
    'keep_short_ribs',
    'keep_soup_bones',
    'bacon_or_belly',
    'ham_preference',
    'shoulder_preference',
    'keep_jowls',
    'keep_fat_back',
    'keep_lard_fat',
    'special_instructions',
)


def snapshot_item(item) -> dict:
    return {
        'cut_id': item.cut_id,
        'cut_name': item.cut_name,
        'cut_category': item.cut_category,
        'thickness': item.thickness,
        'weight_lbs': json_number(item.weight_lbs),
        'pieces_per_package': item.pieces_per_package,
        'sort_order': item.sort_order,
    }


def snapshot_sheet(sheet) -> dict:
    """Full initial field set of a cut sheet, as recorded on its creation entry."""
    snapshot = {name: json_number(getattr(sheet, name)) for name in SNAPSHOT_FIELDS}
    snapshot['items'] = [snapshot_item(item) for item in sheet.items.all()]
    snapshot['sausages'] = [
        {'flavor': s.flavor, 'pounds': json_number(s.pounds)} for s in sheet.sausages.all()
    ]
    return snapshot


def snapshot_package(package) -> dict:
    """Full package row, as recorded when a package is deleted."""
    return {
        'id': str(package.id),
        'cut_sheet_id': str(package.cut_sheet_id),
        'cut_id': package.cut_id,
        'cut_name': package.cut_name,
        'primal_id': package.primal_id,
        'package_number': package.package_number,
        'quantity_in_package': package.quantity_in_package,
        'actual_weight_lbs': json_number(package.actual_weight_lbs),
        'thickness': package.thickness,
        'processing_style': package.processing_style,
        'processor_added': package.processor_added,
        'processor_notes': package.processor_notes,
        'livestock_tracking_id': package.livestock_tracking_id,
    }
