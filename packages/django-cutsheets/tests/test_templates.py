"""Tests for cut sheet templates."""

import pytest

from django_cutsheets.choices import ChangeCategory
from django_cutsheets.models import CutSheet, CutSheetHistory
from django_cutsheets.services import create_cut_sheet_from_template
from django_cutsheets.state import CutSheetState
from django_cutsheets.templates import get_templates_for_organization, load_template, save_as_template


@pytest.fixture
def template_id(db, producer, beef_state):
    """A saved beef template."""
    result = save_as_template(beef_state, 'Family Beef', actor=producer)
    assert result.success, result.error
    return result.data


@pytest.mark.django_db
class TestSaveAsTemplate:
    """Tests for save_as_template."""

    def test_saves_without_order_or_weight(self, template_id):
        """Templates carry neither an order nor a hanging weight."""
        template = CutSheet.objects.get(pk=template_id)

        assert template.is_template
        assert template.template_name == 'Family Beef'
        assert template.processing_order_id is None
        assert template.hanging_weight_lbs is None
        assert template.items.count() == 3

    def test_creation_entry(self, template_id):
        """Saving a template writes a creation entry."""
        entry = CutSheetHistory.objects.get(cut_sheet_id=template_id)

        assert entry.change_category == ChangeCategory.INITIAL_CREATION
        assert entry.change_summary == 'Template created: Family Beef'

    def test_name_required(self, producer, beef_state):
        """A blank name is rejected."""
        result = save_as_template(beef_state, '   ', actor=producer)
        assert result.error_code == 'invalid_selection'

    def test_only_producers(self, processor, beef_state):
        """Processors cannot save templates."""
        result = save_as_template(beef_state, 'Mine', actor=processor)
        assert result.error_code == 'not_authorized'

    def test_invalid_selection(self, producer, beef_state):
        """Templates are validated like cut sheets."""
        beef_state['selected_cuts'].append({'cut_id': 'tbone'})
        result = save_as_template(beef_state, 'Broken', actor=producer)
        assert result.error_code == 'invalid_selection'

    def test_unknown_state_field_rejected(self, producer):
        """Unknown state keys are invalid."""
        result = save_as_template({'animal_type': 'beef', 'colour': 'red'}, 'Red', actor=producer)

        assert result.error_code == 'invalid_selection'
        assert result.error == 'Unknown cut sheet fields: colour'
        assert get_templates_for_organization(actor=producer) == []

    def test_accepts_state_object(self, producer):
        """A CutSheetState can be saved directly."""
        state = CutSheetState(animal_type='lamb')
        result = save_as_template(state, 'Empty Lamb', actor=producer)
        assert result.success


@pytest.mark.django_db
class TestListAndLoad:
    """Tests for listing and loading templates."""

    def test_list_by_name(self, producer, beef_state, template_id):
        """Templates are listed by name for the owning organization."""
        save_as_template(beef_state, 'A Quarter', actor=producer)

        names = [t.name for t in get_templates_for_organization(actor=producer)]
        assert names == ['A Quarter', 'Family Beef']

    def test_list_excludes_cut_sheets(self, cut_sheet, producer):
        """Order cut sheets are not templates."""
        assert get_templates_for_organization(actor=producer) == []

    def test_list_other_org(self, template_id, other_producer, processor):
        """Other organizations see no templates."""
        assert get_templates_for_organization(actor=other_producer) == []
        assert get_templates_for_organization(actor=processor) == []

    def test_load(self, template_id, producer):
        """Loading returns a draft state without hanging weight."""
        state = load_template(template_id, actor=producer)

        assert state.animal_type == 'beef'
        assert state.hanging_weight is None
        assert state.cut_ids() == ['ribeye', 'nystrip', 'filet']
        assert state.selected_cuts['ribeye'].thickness == '1"'
        assert state.selected_cuts['nystrip'].pieces_per_package == 2
        assert state.organs.liver

    def test_load_defaults(self, producer):
        """Missing pork preferences fall back to bacon and roasts."""
        template_id = save_as_template(
            {'animal_type': 'pork', 'bacon_or_belly': 'none', 'ham_preference': 'both'},
            'Pork',
            actor=producer,
        ).data
        CutSheet.objects.filter(pk=template_id).update(bacon_or_belly=None, ham_preference=None)

        state = load_template(template_id, actor=producer)
        assert state.bacon_or_belly == 'bacon'
        assert state.ham_preference == 'roast'
        assert state.ground_package_weight == 1

    def test_load_other_org(self, template_id, other_producer):
        """Another producer cannot load the template."""
        assert load_template(template_id, actor=other_producer) is None

    def test_load_does_not_change_template(self, template_id, producer):
        """Loading leaves the template and its history alone."""
        load_template(template_id, actor=producer)
        assert CutSheetHistory.objects.filter(cut_sheet_id=template_id).count() == 1


@pytest.mark.django_db
class TestCreateFromTemplate:
    """Tests for create_cut_sheet_from_template."""

    def test_create(self, template_id, producer):
        """An order's cut sheet can be created from a template."""
        result = create_cut_sheet_from_template(template_id, 'order-7', 'org-processor', actor=producer)

        assert result.success
        sheet = result.data
        assert not sheet.is_template
        assert sheet.processing_order_id == 'order-7'
        assert sheet.hanging_weight_lbs is None
        assert [i.cut_id for i in sheet.items.all()] == ['ribeye', 'nystrip', 'filet']

    def test_missing_template(self, producer):
        """An unknown template is not found."""
        result = create_cut_sheet_from_template(
            '00000000-0000-0000-0000-000000000000', 'order-7', 'org-processor', actor=producer,
        )
        assert result.error_code == 'not_found'
