"""Tests for the static cut taxonomy."""

import pytest

from django_cutsheets.taxonomy import (
    ANIMALS,
    SAUSAGE_FLAVORS,
    _build_index,
    _cut,
    _primal,
    AnimalSchema,
    all_cut_ids,
    all_cuts,
    count_cuts,
    enumerate_primals,
    find_cut,
    get_animal_schema,
    locate_cut,
)


class TestAnimalSchemas:
    """Tests for animal lookups."""

    def test_four_animals(self):
        """Beef, pork, lamb and goat are defined."""
        assert set(ANIMALS) == {'beef', 'pork', 'lamb', 'goat'}

    def test_unknown_animal(self):
        """Unknown animals have no schema and no primals."""
        assert get_animal_schema('bison') is None
        assert enumerate_primals('bison') == []
        assert all_cuts('bison') == []

    def test_primals_keep_declaration_order(self):
        """Primals are returned in taxonomy order."""
        primal_ids = [p.id for p in enumerate_primals('beef')]
        assert primal_ids[:3] == ['short_loin', 'rib', 'chuck']

    def test_round_has_exclusive_sub_sections(self):
        """Beef round is split into exclusive-choice sub-sections."""
        round_primal = get_animal_schema('beef').primal('round')

        assert round_primal.choices == ()
        assert [s.id for s in round_primal.sub_sections] == [
            'top_round', 'bottom_round', 'eye_round', 'sirloin_tip',
        ]
        assert all(s.exclusive_choice for s in round_primal.sub_sections)

    def test_sausage_flavors(self):
        """Ten sausage flavors are offered for pork."""
        assert len(SAUSAGE_FLAVORS) == 10
        assert 'maple_breakfast' in {f.id for f in SAUSAGE_FLAVORS}


class TestCutLookup:
    """Tests for cut id lookups."""

    def test_find_cut(self):
        """find_cut returns the cut by id."""
        cut = find_cut('ribeye')
        assert cut.name == 'Rib-Eye Steaks'
        assert cut.conflicts_with == ('primerib',)

    def test_find_unknown_cut(self):
        """find_cut returns None for an unknown id."""
        assert find_cut('wagyu_a5') is None
        assert locate_cut('wagyu_a5') is None

    def test_locate_cut_in_sub_section(self):
        """locate_cut reports animal, primal and sub-section."""
        location = locate_cut('london_broil')

        assert location.animal_type == 'beef'
        assert location.primal.id == 'round'
        assert location.sub_section.id == 'top_round'

    def test_locate_cut_without_sub_section(self):
        """Cuts directly on a primal have no sub-section."""
        location = locate_cut('lamb_whole_rack')

        assert location.animal_type == 'lamb'
        assert location.primal.id == 'rack'
        assert location.sub_section is None

    def test_cut_ids_unique_across_animals(self):
        """Every cut id appears once in the whole taxonomy."""
        ids = [cut.id for schema in ANIMALS.values() for cut in schema.all_cuts()]
        assert len(ids) == len(set(ids))
        assert sorted(ids) == sorted(all_cut_ids())

    def test_required_cuts_exist_for_same_animal(self):
        """requires always points at a cut of the same animal."""
        for animal, schema in ANIMALS.items():
            ids = {cut.id for cut in schema.all_cuts()}
            for cut in schema.all_cuts():
                for required in cut.requires:
                    assert required in ids, f"{animal}.{cut.id} requires unknown {required}"

    def test_duplicate_cut_id_fails_loudly(self):
        """Building an index with a repeated cut id raises."""
        schema = AnimalSchema(
            animal_type='beef',
            display_name='Beef',
            primals=(
                _primal('a', 'A', choices=[_cut('dup', 'Dup', 'steak')]),
                _primal('b', 'B', choices=[_cut('dup', 'Dup', 'roast')]),
            ),
        )
        with pytest.raises(ValueError, match="Duplicate cut id 'dup'"):
            _build_index([schema])


class TestCountCuts:
    """Tests for count_cuts."""

    def test_count_with_disabled(self):
        """Disabled cuts reduce the enabled count only."""
        total = len(all_cuts('beef'))
        count = count_cuts('beef', ['tbone', 'porterhouse'])

        assert count.total == total
        assert count.enabled == total - 2

    def test_count_ignores_other_animals(self):
        """Disabled ids of another animal do not change the count."""
        count = count_cuts('pork', ['tbone'])
        assert count.enabled == count.total
