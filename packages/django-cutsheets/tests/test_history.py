"""Tests for the cut sheet change history."""

import pytest
from freezegun import freeze_time

from django_cutsheets.choices import ActorRole, ChangeCategory, ChangeType
from django_cutsheets.history import (
    get_history,
    get_history_by_category,
    get_history_by_role,
    get_history_summary,
    get_original_state,
)
from django_cutsheets.models import CutSheetHistory
from django_cutsheets.services import (
    create_cut_sheet,
    remove_cut,
    update_cut_parameters,
    update_processor_notes,
)


@pytest.mark.django_db
class TestCreationEntry:
    """Tests for the entry written when a cut sheet is created."""

    def test_creation_snapshot(self, cut_sheet, producer):
        """The creation entry holds the full initial state."""
        entry = CutSheetHistory.objects.get(cut_sheet=cut_sheet)

        assert entry.change_type == ChangeType.CREATED
        assert entry.change_category == ChangeCategory.INITIAL_CREATION
        assert entry.change_summary == 'Cut sheet created'
        assert entry.previous_state is None
        assert entry.new_state['animal_type'] == 'beef'
        assert entry.new_state['hanging_weight_lbs'] == 650
        assert entry.new_state['keep_liver'] is True
        assert [i['cut_id'] for i in entry.new_state['items']] == ['ribeye', 'nystrip', 'filet']
        assert entry.changed_fields == list(entry.new_state.keys())

    def test_creation_actor(self, cut_sheet):
        """The entry records the producer who created the sheet."""
        entry = CutSheetHistory.objects.get(cut_sheet=cut_sheet)

        assert entry.changed_by_user_id == 'user-producer'
        assert entry.changed_by_org_id == 'org-producer'
        assert entry.changed_by_role == ActorRole.PRODUCER
        assert entry.processing_order_id == 'order-1'

    def test_original_state_survives_changes(self, cut_sheet, processor, producer):
        """get_original_state returns the creation snapshot after later changes."""
        original = get_original_state(cut_sheet.id, actor=producer)
        remove_cut(cut_sheet.id, 'ribeye', 'Rib-Eye Steaks', 'No yield', actor=processor)

        assert get_original_state(cut_sheet.id, actor=producer) == original
        assert [i['cut_id'] for i in original['items']] == ['ribeye', 'nystrip', 'filet']


@pytest.mark.django_db
class TestImmutability:
    """History entries cannot be changed."""

    def test_update_raises(self, cut_sheet):
        """Saving an existing entry raises."""
        entry = CutSheetHistory.objects.get(cut_sheet=cut_sheet)
        entry.change_summary = 'Rewritten'

        with pytest.raises(ValueError, match='immutable'):
            entry.save()

    def test_delete_raises(self, cut_sheet):
        """Deleting an entry raises."""
        entry = CutSheetHistory.objects.get(cut_sheet=cut_sheet)

        with pytest.raises(ValueError, match='immutable'):
            entry.delete()
        assert CutSheetHistory.objects.filter(pk=entry.pk).exists()


@pytest.mark.django_db
class TestHistoryQueries:
    """Tests for the history read functions."""

    def test_newest_first(self, producer, processor, beef_state):
        """Entries are returned newest first."""
        with freeze_time('2026-03-01 09:00:00'):
            sheet = create_cut_sheet(beef_state, 'order-1', 'org-processor', actor=producer).data
        with freeze_time('2026-03-02 09:00:00'):
            update_processor_notes(sheet.id, 'Monday', actor=processor)
        with freeze_time('2026-03-03 09:00:00'):
            remove_cut(sheet.id, 'ribeye', 'Rib-Eye Steaks', 'No yield', actor=processor)

        categories = [e.change_category for e in get_history(sheet.id, actor=producer)]
        assert categories == [
            ChangeCategory.CUT_REMOVED,
            ChangeCategory.NOTES_UPDATED,
            ChangeCategory.INITIAL_CREATION,
        ]

    def test_same_timestamp_ordered_by_id(self, cut_sheet, processor):
        """Entries written in the same instant keep insertion order, newest first."""
        with freeze_time('2030-03-02 09:00:00'):
            update_processor_notes(cut_sheet.id, 'first', actor=processor)
            update_processor_notes(cut_sheet.id, 'second', actor=processor)

        entries = get_history(cut_sheet.id, actor=processor)
        assert entries[0].new_state == {'processor_notes': 'second'}
        assert entries[1].new_state == {'processor_notes': 'first'}

    def test_by_category(self, cut_sheet, processor):
        """Entries can be filtered by category."""
        update_processor_notes(cut_sheet.id, 'Monday', actor=processor)
        update_cut_parameters(cut_sheet.id, 'ribeye', {'thickness': '2"'}, actor=processor)

        entries = get_history_by_category(cut_sheet.id, ChangeCategory.NOTES_UPDATED, actor=processor)
        assert [e.change_summary for e in entries] == ['Updated processor notes']

    def test_by_role(self, cut_sheet, processor):
        """Entries can be filtered by the role that made them."""
        update_processor_notes(cut_sheet.id, 'Monday', actor=processor)

        assert len(get_history_by_role(cut_sheet.id, ActorRole.PROCESSOR, actor=processor)) == 1
        assert len(get_history_by_role(cut_sheet.id, ActorRole.PRODUCER, actor=processor)) == 1

    def test_summary(self, cut_sheet, processor, producer):
        """The summary counts changes per role."""
        with freeze_time('2030-04-01 12:00:00'):
            update_processor_notes(cut_sheet.id, 'Monday', actor=processor)
            update_cut_parameters(cut_sheet.id, 'ribeye', {'thickness': '2"'}, actor=processor)

        summary = get_history_summary(cut_sheet.id, actor=producer)
        assert summary.total_changes == 3
        assert summary.producer_changes == 1
        assert summary.processor_changes == 2
        assert summary.last_modified_by == 'processor'
        assert summary.last_modified.isoformat().startswith('2030-04-01T12:00:00')


@pytest.mark.django_db
class TestHistoryAccess:
    """Outsiders see no history."""

    def test_other_processor_sees_nothing(self, cut_sheet, other_processor):
        """An unassigned processor gets empty results."""
        assert get_history(cut_sheet.id, actor=other_processor) == []
        assert get_history_by_category(cut_sheet.id, ChangeCategory.GENERAL, actor=other_processor) == []
        assert get_original_state(cut_sheet.id, actor=other_processor) is None

        summary = get_history_summary(cut_sheet.id, actor=other_processor)
        assert summary.total_changes == 0
        assert summary.last_modified is None

    def test_other_producer_sees_nothing(self, cut_sheet, other_producer):
        """Another producer gets empty results."""
        assert get_history(cut_sheet.id, actor=other_producer) == []

    def test_no_actor_sees_nothing(self, cut_sheet):
        """Without an actor nothing is returned."""
        assert get_history(cut_sheet.id) == []

    def test_unknown_cut_sheet(self, producer):
        """Unknown or malformed ids return empty results."""
        assert get_history('00000000-0000-0000-0000-000000000000', actor=producer) == []
        assert get_history('nope', actor=producer) == []
