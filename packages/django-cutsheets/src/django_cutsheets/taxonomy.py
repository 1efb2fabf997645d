"""Static cut taxonomy: animal -> primal -> cut choices.

The taxonomy is plain data, versioned with the deployment. Cut ids are unique
across the whole taxonomy so configuration rows and cut sheets can reference a
cut without qualifying it by animal or primal. The index is built at import
and fails loudly on a duplicate id.

Usage:
    from django_cutsheets.taxonomy import find_cut, enumerate_primals

    cut = find_cut('ribeye')            # CutChoice or None
    primals = enumerate_primals('beef')  # ordered list of Primal
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

TAXONOMY_VERSION = "1.0"


@dataclass(frozen=True)
class CutChoice:
    """A single selectable cut.

    Constraint attributes reference other cut ids:
        excludes: hard conflict, selecting this disables those
        conflicts_with: soft conflict, both allowed but yield is shared
        requires: must be selected together
        reduces_yield: comes from the same area as the referenced cut/primal
    """

    id: str
    name: str
    cut_type: str
    specialty: bool = False
    additional_fee: bool = False
    bone_in: Optional[bool] = None
    independent: bool = False
    note: str = ''
    excludes: Tuple[str, ...] = ()
    conflicts_with: Tuple[str, ...] = ()
    requires: Tuple[str, ...] = ()
    reduces_yield: str = ''


@dataclass(frozen=True)
class Primal:
    id: str
    display_name: str
    choices: Tuple[CutChoice, ...] = ()
    sub_sections: Tuple['Primal', ...] = ()
    description: str = ''
    conflict_group: str = ''
    allow_split: bool = False
    exclusive_choice: bool = False

    def all_choices(self) -> List[CutChoice]:
        """Choices of this primal followed by those of its sub-sections."""
        cuts = list(self.choices)
        for sub in self.sub_sections:
            cuts.extend(sub.choices)
        return cuts


@dataclass(frozen=True)
class AnimalSchema:
    animal_type: str
    display_name: str
    primals: Tuple[Primal, ...]
    note: str = ''

    def primal(self, primal_id: str) -> Optional[Primal]:
        for primal in self.primals:
            if primal.id == primal_id:
                return primal
        return None

    def all_cuts(self) -> List[CutChoice]:
        cuts = []
        for primal in self.primals:
            cuts.extend(primal.all_choices())
        return cuts


@dataclass(frozen=True)
class CutLocation:
    """Where a cut lives in the taxonomy."""

    animal_type: str
    primal: Primal
    sub_section: Optional[Primal]
    cut: CutChoice


@dataclass(frozen=True)
class CutCount:
    enabled: int
    total: int


@dataclass(frozen=True)
class SausageFlavor:
    id: str
    name: str
    hint: str = ''


def _cut(cut_id, name, cut_type, **kwargs):
    for key in ('excludes', 'conflicts_with', 'requires'):
        if key in kwargs:
            kwargs[key] = tuple(kwargs[key])
    return CutChoice(id=cut_id, name=name, cut_type=cut_type, **kwargs)


def _primal(primal_id, display_name, choices=(), sub_sections=(), **kwargs):
    return Primal(
        id=primal_id,
        display_name=display_name,
        choices=tuple(choices),
        sub_sections=tuple(sub_sections),
        **kwargs,
    )


# =============================================================================
# BEEF
# =============================================================================

BEEF = AnimalSchema(
    animal_type='beef',
    display_name='Beef',
    primals=(
        _primal('short_loin', 'Short Loin', conflict_group='tbone_conflict',
                description='Contains both NY Strip and Tenderloin connected by T-shaped bone', choices=[
            _cut('tbone', 'T-Bone Steaks', 'steak', bone_in=True, excludes=['nystrip', 'filet', 'porterhouse']),
            _cut('porterhouse', 'Porterhouse Steaks', 'steak', bone_in=True, excludes=['nystrip', 'filet', 'tbone']),
            _cut('nystrip', 'NY Strip Steaks', 'steak', bone_in=False, excludes=['tbone', 'porterhouse'], requires=['filet']),
            _cut('filet', 'Filet Mignon / Tenderloin', 'steak', bone_in=False, excludes=['tbone', 'porterhouse'], requires=['nystrip']),
        ]),
        _primal('rib', 'Rib', conflict_group='rib_allocation', allow_split=True,
                description='Can be steaks OR roasts, or a combination', choices=[
            _cut('ribeye', 'Rib-Eye Steaks', 'steak', conflicts_with=['primerib']),
            _cut('primerib', 'Prime Rib / Standing Rib Roast', 'roast', conflicts_with=['ribeye']),
            _cut('rib_ground', 'Ground to Hamburger', 'ground', conflicts_with=['ribeye', 'primerib']),
        ]),
        _primal('chuck', 'Chuck', allow_split=True,
                description='Front shoulder - can be steaks, roasts, stew, or ground', choices=[
            _cut('chuck_roast', 'Chuck Roasts', 'roast'),
            _cut('chuck_steak', 'Chuck Steaks', 'steak'),
            _cut('denver_steak', 'Denver Steaks', 'steak', specialty=True, conflicts_with=['chuck_roast', 'chuck_steak']),
            _cut('flat_iron', 'Flat Iron Steaks', 'steak', specialty=True, conflicts_with=['chuck_roast', 'chuck_steak']),
            _cut('stew_meat', 'Stew Meat', 'cubed'),
            _cut('chuck_ground', 'Ground to Hamburger', 'ground'),
        ]),
        _primal('round', 'Round', description='Rear leg - multiple sections each with their own options', sub_sections=[
            _primal('top_round', 'Top Round', exclusive_choice=True, choices=[
                _cut('top_round_steak', 'Round Steaks', 'steak'),
                _cut('london_broil', 'London Broil', 'steak', note='Thick cut ~2 inches'),
                _cut('top_round_roast', 'Top Round Roast', 'roast'),
                _cut('top_round_ground', 'Ground to Hamburger', 'ground'),
            ]),
            _primal('bottom_round', 'Bottom Round', exclusive_choice=True, choices=[
                _cut('bottom_round_roast', 'Bottom Round Roast', 'roast'),
                _cut('cube_steak', 'Cube Steaks (Tenderized)', 'steak'),
                _cut('bottom_round_ground', 'Ground to Hamburger', 'ground'),
            ]),
            _primal('eye_round', 'Eye of Round', exclusive_choice=True, choices=[
                _cut('eye_round_roast', 'Eye Round Roast', 'roast'),
                _cut('eye_round_steak', 'Eye Round Steaks (Medallions)', 'steak'),
                _cut('eye_round_ground', 'Ground to Hamburger', 'ground'),
            ]),
            _primal('sirloin_tip', 'Sirloin Tip', exclusive_choice=True, choices=[
                _cut('sirloin_tip_roast', 'Sirloin Tip Roast', 'roast'),
                _cut('sirloin_tip_steak', 'Sirloin Tip Steaks', 'steak'),
                _cut('sirloin_tip_ground', 'Ground to Hamburger', 'ground'),
            ]),
        ]),
        _primal('sirloin', 'Sirloin', allow_split=True, choices=[
            _cut('sirloin_steak', 'Sirloin Steaks', 'steak'),
            _cut('tritip', 'Tri-Tip Roast', 'roast', reduces_yield='sirloin_steak'),
            _cut('picanha', 'Picanha (Coulotte)', 'roast', specialty=True, reduces_yield='sirloin_steak'),
            _cut('sirloin_ground', 'Ground to Hamburger', 'ground'),
        ]),
        _primal('brisket', 'Brisket', exclusive_choice=True, choices=[
            _cut('whole_brisket', 'Whole Packer Brisket', 'roast'),
            _cut('split_brisket', 'Split (Flat and Point)', 'roast'),
            _cut('corned_beef', 'Corned Beef (Cured)', 'cured', additional_fee=True),
            _cut('brisket_ground', 'Ground to Hamburger', 'ground'),
        ]),
        _primal('short_ribs', 'Short Ribs', choices=[
            _cut('short_ribs_bone', 'Bone-In Short Ribs', 'ribs'),
            _cut('short_ribs_boneless', 'Boneless Short Rib Meat', 'meat'),
            _cut('short_ribs_ground', 'Ground to Hamburger', 'ground'),
        ]),
        _primal('flank', 'Flank', choices=[
            _cut('flank_steak', 'Flank Steak', 'steak'),
            _cut('flank_ground', 'Ground to Hamburger', 'ground'),
        ]),
        _primal('skirt', 'Skirt', choices=[
            _cut('skirt_steak', 'Skirt Steak (Fajita)', 'steak'),
            _cut('skirt_ground', 'Ground to Hamburger', 'ground'),
        ]),
    ),
)


# =============================================================================
# PORK
# =============================================================================

PORK = AnimalSchema(
    animal_type='pork',
    display_name='Pork',
    primals=(
        _primal('loin', 'Loin', allow_split=True, choices=[
            _cut('pork_chops', 'Pork Chops', 'chop', conflicts_with=['loin_roast_whole']),
            _cut('loin_roast', 'Loin Roast', 'roast', conflicts_with=['pork_chops']),
            _cut('loin_roast_whole', 'Whole Loin Roast', 'roast', excludes=['pork_chops']),
            _cut('tenderloin', 'Tenderloin', 'roast', independent=True,
                 note='Separate muscle - can be kept regardless of chop/roast choice'),
            _cut('baby_back_ribs', 'Baby Back Ribs', 'ribs', reduces_yield='loin'),
        ]),
        _primal('ham', 'Leg / Ham', conflict_group='ham_processing', choices=[
            _cut('fresh_ham', 'Fresh Ham (Uncured Roast)', 'roast', excludes=['cured_ham', 'smoked_ham']),
            _cut('cured_ham', 'Cured Ham', 'cured', excludes=['fresh_ham'], additional_fee=True),
            _cut('ham_steaks', 'Ham Steaks', 'steak', reduces_yield='ham'),
        ]),
        _primal('shoulder', 'Shoulder', sub_sections=[
            _primal('boston_butt', 'Boston Butt', choices=[
                _cut('boston_butt_whole', 'Whole (for smoking/pulling)', 'roast'),
                _cut('boston_butt_roasts', 'Smaller Roasts', 'roast'),
                _cut('boston_butt_steaks', 'Blade Steaks', 'steak'),
                _cut('boston_butt_ground', 'Ground/Sausage', 'ground'),
            ]),
            _primal('picnic_shoulder', 'Picnic Shoulder', choices=[
                _cut('picnic_roast', 'Picnic Roast', 'roast'),
                _cut('picnic_ground', 'Ground/Sausage', 'ground'),
            ]),
        ]),
        _primal('belly', 'Belly / Side', conflict_group='belly_processing', choices=[
            _cut('bacon', 'Bacon (Cured/Smoked)', 'cured', excludes=['fresh_belly'], additional_fee=True),
            _cut('fresh_belly', 'Fresh Pork Belly', 'roast', excludes=['bacon']),
            _cut('spare_ribs', 'Spare Ribs', 'ribs', reduces_yield='belly'),
        ]),
    ),
)


# =============================================================================
# LAMB
# =============================================================================

LAMB = AnimalSchema(
    animal_type='lamb',
    display_name='Lamb',
    primals=(
        _primal('rack', 'Rack', conflict_group='rack_allocation', choices=[
            _cut('lamb_whole_rack', 'Whole Rack of Lamb', 'roast',
                 excludes=['lamb_rib_chops', 'lamb_lollipops', 'crown_roast']),
            _cut('lamb_rib_chops', 'Rib Chops (Cutlets)', 'chop', excludes=['lamb_whole_rack', 'crown_roast']),
            _cut('lamb_lollipops', 'Lamb Lollipops (French-trimmed chops)', 'chop',
                 excludes=['lamb_whole_rack', 'lamb_rib_chops']),
            _cut('crown_roast', 'Crown Roast', 'roast', excludes=['lamb_whole_rack', 'lamb_rib_chops'],
                 note='Uses both racks tied together'),
        ]),
        _primal('loin', 'Loin', conflict_group='loin_allocation', choices=[
            _cut('lamb_loin_chops', 'Loin Chops (Lamb T-Bones)', 'chop', excludes=['lamb_loin_roast', 'saddle']),
            _cut('lamb_loin_roast', 'Boneless Loin Roast', 'roast', excludes=['lamb_loin_chops', 'saddle']),
            _cut('saddle', 'Saddle (Bone-in Loin Roast)', 'roast', excludes=['lamb_loin_chops', 'lamb_loin_roast']),
        ]),
        _primal('leg', 'Leg', conflict_group='leg_allocation', choices=[
            _cut('lamb_whole_leg', 'Whole Leg Roast (Bone-in)', 'roast', excludes=['butterflied_leg', 'lamb_leg_steaks']),
            _cut('butterflied_leg', 'Butterflied Leg (Boneless)', 'roast', excludes=['lamb_whole_leg']),
            _cut('lamb_leg_steaks', 'Leg Steaks', 'steak', reduces_yield='leg'),
            _cut('boneless_leg_roast', 'Boneless Leg Roast (Rolled/Tied)', 'roast', excludes=['lamb_whole_leg']),
        ]),
        _primal('shoulder', 'Shoulder', allow_split=True, choices=[
            _cut('lamb_shoulder_roast', 'Whole Shoulder Roast', 'roast', conflicts_with=['lamb_shoulder_chops']),
            _cut('lamb_shoulder_chops', 'Shoulder Chops (Blade/Arm)', 'chop', conflicts_with=['lamb_shoulder_roast']),
            _cut('lamb_stew', 'Stew Meat (Cubed)', 'cubed'),
            _cut('lamb_ground', 'Ground Lamb', 'ground'),
        ]),
        _primal('breast', 'Breast/Shank', choices=[
            _cut('denver_ribs', 'Denver Ribs', 'ribs'),
            _cut('riblets', 'Riblets', 'ribs'),
            _cut('foreshank', 'Foreshanks', 'shank'),
            _cut('breast_ground', 'Ground', 'ground'),
        ]),
    ),
)


# =============================================================================
# GOAT
# =============================================================================

GOAT = AnimalSchema(
    animal_type='goat',
    display_name='Goat',
    note='Goat follows similar structure to lamb',
    primals=(
        _primal('rack', 'Rack', conflict_group='rack_allocation', choices=[
            _cut('goat_whole_rack', 'Whole Rack of Goat', 'roast', excludes=['goat_rib_chops']),
            _cut('goat_rib_chops', 'Rib Chops', 'chop', excludes=['goat_whole_rack']),
        ]),
        _primal('loin', 'Loin', conflict_group='loin_allocation', choices=[
            _cut('goat_loin_chops', 'Loin Chops', 'chop', excludes=['goat_loin_roast']),
            _cut('goat_loin_roast', 'Loin/Saddle Roast', 'roast', excludes=['goat_loin_chops']),
        ]),
        _primal('leg', 'Leg', conflict_group='leg_allocation', choices=[
            _cut('goat_whole_leg', 'Whole Leg Roast', 'roast', excludes=['goat_leg_steaks']),
            _cut('goat_leg_steaks', 'Leg Steaks', 'steak', excludes=['goat_whole_leg']),
        ]),
        _primal('shoulder', 'Shoulder', allow_split=True, choices=[
            _cut('goat_shoulder_roast', 'Shoulder Roast', 'roast'),
            _cut('goat_shoulder_chops', 'Shoulder Chops', 'chop'),
            _cut('curry_meat', 'Curry Meat (Cubed)', 'cubed'),
            _cut('goat_stew_meat', 'Stew Meat', 'cubed'),
            _cut('goat_ground', 'Ground Goat', 'ground'),
        ]),
        _primal('shank', 'Shank', choices=[
            _cut('osso_bucco', 'Osso Bucco (Cross-cut)', 'shank'),
            _cut('whole_shank', 'Whole Shanks', 'shank'),
        ]),
    ),
)


ANIMALS: Dict[str, AnimalSchema] = {
    schema.animal_type: schema for schema in (BEEF, PORK, LAMB, GOAT)
}

SAUSAGE_FLAVORS: Tuple[SausageFlavor, ...] = (
    SausageFlavor('mild', 'Mild Sausage', 'Traditional breakfast style'),
    SausageFlavor('medium', 'Medium Sausage', 'Light kick'),
    SausageFlavor('hot', 'Hot Sausage', 'Spicy'),
    SausageFlavor('sweet_italian', 'Sweet Italian', 'Fennel and herbs'),
    SausageFlavor('hot_italian', 'Hot Italian', 'Spicy Italian style'),
    SausageFlavor('chorizo', 'Chorizo', 'Mexican style'),
    SausageFlavor('bratwurst', 'Bratwurst', 'German style'),
    SausageFlavor('polish', 'Polish Sausage', 'Kielbasa style'),
    SausageFlavor('breakfast', 'Breakfast Links', 'Classic breakfast'),
    SausageFlavor('maple_breakfast', 'Maple Breakfast', 'Sweet maple flavor'),
)

SAUSAGE_FLAVOR_IDS = frozenset(flavor.id for flavor in SAUSAGE_FLAVORS)


def _build_index(animals: Iterable[AnimalSchema]) -> Dict[str, CutLocation]:
    index: Dict[str, CutLocation] = {}
    for schema in animals:
        for primal in schema.primals:
            sections = [(None, primal.choices)] + [(sub, sub.choices) for sub in primal.sub_sections]
            for sub_section, choices in sections:
                for cut in choices:
                    if cut.id in index:
                        existing = index[cut.id]
                        raise ValueError(
                            f"Duplicate cut id '{cut.id}' in {schema.animal_type}.{primal.id}; "
                            f"already defined in {existing.animal_type}.{existing.primal.id}"
                        )
                    index[cut.id] = CutLocation(schema.animal_type, primal, sub_section, cut)
    return index


_CUT_INDEX = _build_index(ANIMALS.values())


# =============================================================================
# LOOKUPS
# =============================================================================

def get_animal_schema(animal_type: str) -> Optional[AnimalSchema]:
    """Return the schema for an animal type, or None if unknown."""
    return ANIMALS.get(animal_type)


def find_cut(cut_id: str) -> Optional[CutChoice]:
    """Return the cut with this id, or None if it is not in the taxonomy."""
    location = _CUT_INDEX.get(cut_id)
    return location.cut if location else None


def locate_cut(cut_id: str) -> Optional[CutLocation]:
    """Return the animal/primal/sub-section a cut belongs to, or None."""
    return _CUT_INDEX.get(cut_id)


def enumerate_primals(animal_type: str) -> List[Primal]:
    schema = get_animal_schema(animal_type)
    return list(schema.primals) if schema else []


def all_cuts(animal_type: str) -> List[CutChoice]:
    schema = get_animal_schema(animal_type)
    return schema.all_cuts() if schema else []


def count_cuts(animal_type: str, disabled_cuts: Iterable[str] = ()) -> CutCount:
    """Count enabled and total cuts for an animal given a disabled set."""
    disabled = set(disabled_cuts)
    cuts = all_cuts(animal_type)
    enabled = sum(1 for cut in cuts if cut.id not in disabled)
    return CutCount(enabled=enabled, total=len(cuts))


def all_cut_ids() -> List[str]:
    return list(_CUT_INDEX.keys())
