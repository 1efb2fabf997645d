"""Tests for cut selection validation."""

from django_cutsheets.validation import (
    can_add_cut,
    get_cut_availability,
    get_required_cuts,
    get_would_disable,
    normalize_selections,
    validate_selections,
)


class TestValidateSelections:
    """Tests for validate_selections."""

    def test_valid_selection(self):
        """NY strip with filet and rib-eye is valid."""
        result = validate_selections('beef', ['ribeye', 'nystrip', 'filet'])

        assert result.is_valid
        assert result.errors == []

    def test_excludes_is_an_error(self):
        """T-bone and NY strip cannot be selected together."""
        result = validate_selections('beef', ['tbone', 'nystrip', 'filet'])

        assert not result.is_valid
        excludes = [e for e in result.errors if e.type == 'excludes']
        assert excludes[0].cut_id == 'tbone'
        assert excludes[0].conflicting_cut_id == 'nystrip'
        assert excludes[0].message == (
            'Cannot select both "T-Bone Steaks" and "NY Strip Steaks" - '
            'they come from the same section of the animal.'
        )

    def test_requires_is_an_error(self):
        """NY strip without filet is invalid."""
        result = validate_selections('beef', ['nystrip'])

        assert not result.is_valid
        assert [(e.type, e.conflicting_cut_id) for e in result.errors] == [('requires', 'filet')]

    def test_exclusive_choice_in_sub_section(self):
        """Only one option per round sub-section."""
        result = validate_selections('beef', ['top_round_steak', 'london_broil'])

        assert not result.is_valid
        assert {e.type for e in result.errors} == {'exclusive_choice'}
        assert 'Top Round' in result.errors[0].message

    def test_exclusive_choice_across_sub_sections_is_fine(self):
        """Different round sub-sections do not conflict."""
        result = validate_selections('beef', ['top_round_steak', 'bottom_round_roast', 'eye_round_roast'])
        assert result.is_valid

    def test_exclusive_choice_on_primal(self):
        """Brisket allows a single option."""
        result = validate_selections('beef', ['whole_brisket', 'corned_beef'])

        assert not result.is_valid
        assert result.errors[0].type == 'exclusive_choice'

    def test_conflicts_with_is_a_single_warning(self):
        """Rib-eye and prime rib warn once, not once per direction."""
        result = validate_selections('beef', ['ribeye', 'primerib'])

        assert result.is_valid
        assert [w.type for w in result.warnings] == ['conflicts_with']
        assert result.warnings[0].cut_id == 'ribeye'

    def test_reduces_yield_warning(self):
        """Tri-tip reduces sirloin steak yield."""
        result = validate_selections('beef', ['sirloin_steak', 'tritip'])

        assert result.is_valid
        assert result.warnings[0].type == 'reduces_yield'
        assert result.warnings[0].affected_cut_id == 'sirloin_steak'

    def test_pork_belly_excludes(self):
        """Bacon and fresh belly exclude each other."""
        result = validate_selections('pork', ['bacon', 'fresh_belly'])

        assert not result.is_valid
        assert len([e for e in result.errors if e.type == 'excludes']) == 2

    def test_pork_whole_loin_excludes_chops(self):
        """A whole loin roast cannot be combined with chops."""
        result = validate_selections('pork', ['pork_chops', 'loin_roast_whole'])
        assert not result.is_valid

    def test_disabled_options(self):
        """Selecting T-bone disables the cuts it excludes."""
        result = validate_selections('beef', ['tbone'])

        disabled = {d.cut_id: d for d in result.disabled_options}
        assert set(disabled) >= {'nystrip', 'filet', 'porterhouse'}
        assert disabled['nystrip'].reason == 'Disabled because "T-Bone Steaks" is selected'
        assert disabled['nystrip'].disabled_by == 'tbone'

    def test_unknown_animal_is_invalid(self):
        """An unknown animal is invalid without errors."""
        result = validate_selections('bison', ['ribeye'])

        assert not result.is_valid
        assert result.errors == []

    def test_custom_cut_ids_are_ignored(self):
        """Ids outside the taxonomy are left to the caller."""
        result = validate_selections('beef', ['ribeye', 'house_jerky'])
        assert result.is_valid


class TestAvailability:
    """Tests for availability helpers."""

    def test_cut_availability(self):
        """Every beef cut is reported; excluded ones are unavailable."""
        availability = {a.cut_id: a for a in get_cut_availability('beef', ['tbone'])}

        assert availability['ribeye'].available
        assert not availability['filet'].available
        assert availability['filet'].disabled_by == 'tbone'

    def test_can_add_cut(self):
        """can_add_cut reports the cut that blocks it."""
        blocked = can_add_cut('beef', 'nystrip', ['tbone'])
        allowed = can_add_cut('beef', 'ribeye', ['tbone'])

        assert not blocked.available
        assert blocked.disabled_by == 'tbone'
        assert allowed.available

    def test_can_add_unknown_cut(self):
        """Unknown cuts cannot be added."""
        result = can_add_cut('beef', 'wagyu_a5', [])

        assert not result.available
        assert result.reason == 'Cut not found'

    def test_exclusive_group_disables_siblings(self):
        """A top round choice disables the other top round options."""
        availability = {a.cut_id: a for a in get_cut_availability('beef', ['london_broil'])}

        assert not availability['top_round_roast'].available
        assert availability['top_round_roast'].reason == 'Only one option from "Top Round" can be selected'
        assert availability['bottom_round_roast'].available

    def test_would_disable(self):
        """get_would_disable lists excluded cuts."""
        ids = {d.cut_id for d in get_would_disable('beef', 'tbone')}
        assert ids == {'nystrip', 'filet', 'porterhouse'}

    def test_would_disable_exclusive_siblings(self):
        """get_would_disable includes exclusive-choice siblings."""
        ids = {d.cut_id for d in get_would_disable('beef', 'whole_brisket')}
        assert ids == {'split_brisket', 'corned_beef', 'brisket_ground'}

    def test_required_cuts(self):
        """NY strip requires filet."""
        assert [c.id for c in get_required_cuts('beef', 'nystrip')] == ['filet']
        assert get_required_cuts('beef', 'ribeye') == []


class TestNormalizeSelections:
    """Tests for normalize_selections."""

    def test_adds_required_pair(self):
        """A NY strip selection pulls in the filet."""
        result = normalize_selections('beef', ['nystrip'])

        assert result.selections == ['nystrip', 'filet']
        assert result.added == ['filet']
        assert result.messages == ['Added "Filet Mignon / Tenderloin" (required by "NY Strip Steaks")']

    def test_earlier_selection_wins(self):
        """Later selections that conflict with earlier ones are dropped."""
        result = normalize_selections('beef', ['tbone', 'nystrip'])

        assert result.selections == ['tbone']
        assert result.removed == ['nystrip', 'filet']
        assert 'Removed "NY Strip Steaks" (conflicts with "T-Bone Steaks")' in result.messages

    def test_valid_selection_unchanged(self):
        """Nothing changes for a valid selection."""
        result = normalize_selections('beef', ['ribeye', 'nystrip', 'filet'])

        assert result.selections == ['ribeye', 'nystrip', 'filet']
        assert result.added == []
        assert result.removed == []
