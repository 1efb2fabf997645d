"""Reusable cut sheet templates.

A template is a CutSheet with ``is_template=True``: it belongs to a producer
organization, has a name, and has no order, hanging weight or packages.
Loading a template returns a fresh draft CutSheetState and never changes the
template itself.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from .access import fetch_cut_sheet
from .actors import require_actor
from .exceptions import InvalidSelection, NotAuthorized
from .history import run_audited
from .middleware import get_current_actor
from .models import CutSheet
from .results import OperationResult, returns_result
from .services import as_state, check_selections, create_document, creation_record
from .state import CutSheetState, state_from_sheet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateSummary:
    id: str
    name: str
    animal_type: str


def get_templates_for_organization(*, actor=None) -> List[TemplateSummary]:
    """Templates of the actor's producer organization, by name."""
    actor = actor or get_current_actor()
    if actor is None or not actor.is_producer:
        return []
    templates = (
        CutSheet.objects.filter(producer_id=actor.organization_id, is_template=True)
        .order_by('template_name')
        .values_list('id', 'template_name', 'animal_type')
    )
    return [
        TemplateSummary(id=str(pk), name=name or 'Unnamed Template', animal_type=animal)
        for pk, name, animal in templates
    ]


@returns_result
def save_as_template(state, template_name: str, *, actor=None) -> OperationResult:
    """Save a producer's selections as a named template.

    Returns:
        OperationResult with the template id as ``data``
    """
    actor = require_actor(actor)
    if not actor.is_producer:
        raise NotAuthorized('Only producers can save templates')
    if not template_name or not template_name.strip():
        raise InvalidSelection('Template name is required')
    state = as_state(state)
    check_selections(state)

    def write():
        template = create_document(
            state,
            actor,
            template=True,
            template_name=template_name.strip(),
            processing_order_id=None,
        )
        return creation_record(template, f"Template created: {template.template_name}"), str(template.id)

    return run_audited(None, actor, write)


def load_template(template_id, *, actor=None) -> Optional[CutSheetState]:
    """Fresh draft state from a template owned by the actor's organization.

    Hanging weight is never loaded. Missing values fall back to defaults:
    2 pieces per package, 1 lb ground packages, bacon and roasts for pork.
    """
    actor = actor or get_current_actor()
    if actor is None or not actor.is_producer:
        return None
    template = fetch_cut_sheet(template_id)
    if template is None or not template.is_template or template.producer_id != actor.organization_id:
        logger.debug("Template %s not available to organization %s", template_id, actor.organization_id)
        return None
    return state_from_sheet(template)
