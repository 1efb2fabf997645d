"""Pytest configuration for django-cutsheets tests."""

import pytest

from django_cutsheets.actors import Actor
from django_cutsheets.middleware import clear_actor_context


@pytest.fixture(autouse=True)
def _clear_actor_context():
    """No actor leaks between tests through thread-local storage."""
    clear_actor_context()
    yield
    clear_actor_context()


@pytest.fixture
def producer():
    """User of the producer organization that owns the cut sheets."""
    return Actor(user_id='user-producer', organization_id='org-producer', organization_type='producer')


@pytest.fixture
def other_producer():
    """User of an unrelated producer organization."""
    return Actor(user_id='user-other-producer', organization_id='org-other-producer', organization_type='producer')


@pytest.fixture
def processor():
    """User of the processor assigned to the orders."""
    return Actor(user_id='user-processor', organization_id='org-processor', organization_type='processor')


@pytest.fixture
def other_processor():
    """User of a processor not assigned to any order."""
    return Actor(user_id='user-other-processor', organization_id='org-other-processor', organization_type='processor')


@pytest.fixture
def beef_state():
    """Beef selections: rib-eyes plus the NY strip / filet pair."""
    return {
        'animal_type': 'beef',
        'hanging_weight': 650,
        'selected_cuts': [
            {'cut_id': 'ribeye', 'cut_name': 'Rib-Eye Steaks', 'category': 'steak', 'thickness': '1"'},
            {'cut_id': 'nystrip', 'cut_name': 'NY Strip Steaks', 'category': 'steak'},
            {'cut_id': 'filet', 'cut_name': 'Filet Mignon / Tenderloin', 'category': 'steak'},
        ],
        'ground_type': 'vacuum',
        'organs': {'liver': True},
    }


@pytest.fixture
def pork_state():
    """Pork selections with bacon and two sausage flavors."""
    return {
        'animal_type': 'pork',
        'hanging_weight': 210,
        'selected_cuts': [
            {'cut_id': 'pork_chops', 'cut_name': 'Pork Chops', 'category': 'steak'},
            {'cut_id': 'bacon', 'cut_name': 'Bacon (Cured/Smoked)', 'category': 'bacon'},
        ],
        'sausages': [{'flavor': 'mild', 'pounds': 10}, {'flavor': 'chorizo', 'pounds': 5}],
        'bacon_or_belly': 'bacon',
        'ham_preference': 'sliced',
    }


@pytest.fixture
def make_cut_sheet(db, producer):
    """Factory creating a cut sheet for an order through the service."""
    from django_cutsheets.services import create_cut_sheet

    def _make(state, order_id='order-1', processor_id='org-processor', actor=None):
        result = create_cut_sheet(state, order_id, processor_id, actor=actor or producer)
        assert result.success, result.error
        return result.data

    return _make


@pytest.fixture
def cut_sheet(make_cut_sheet, beef_state):
    """A draft beef cut sheet for order-1 assigned to org-processor."""
    return make_cut_sheet(beef_state)
