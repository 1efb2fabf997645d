"""Row-level access rules for cut sheets.

- The owning producer and the assigned processor can read a cut sheet
- Only the owning producer edits its own selections and templates
- Only the assigned processor applies overlays, weights and packages
"""
from typing import Optional

from django.core.exceptions import ValidationError

from .exceptions import NotAuthorized, NotFound
from .models import CutSheet


def can_view(actor, cut_sheet: CutSheet) -> bool:
    if actor is None:
        return False
    if actor.is_producer:
        return cut_sheet.producer_id == actor.organization_id
    if actor.is_processor:
        return not cut_sheet.is_template and cut_sheet.processor_id == actor.organization_id
    return False


def is_owner(actor, cut_sheet: CutSheet) -> bool:
    return actor.is_producer and cut_sheet.producer_id == actor.organization_id


def is_assigned_processor(actor, cut_sheet: CutSheet) -> bool:
    return (
        actor.is_processor
        and not cut_sheet.is_template
        and cut_sheet.processor_id == actor.organization_id
    )


def fetch_cut_sheet(cut_sheet_id) -> Optional[CutSheet]:
    """Cut sheet by id, None if missing or the id is malformed."""
    try:
        return CutSheet.objects.filter(pk=cut_sheet_id).first()
    except (ValidationError, ValueError):
        return None


def get_visible_cut_sheet(actor, cut_sheet_id) -> Optional[CutSheet]:
    """The cut sheet if ``actor`` may see it, else None."""
    cut_sheet = fetch_cut_sheet(cut_sheet_id)
    if cut_sheet is None or not can_view(actor, cut_sheet):
        return None
    return cut_sheet


def get_cut_sheet_for_processor(actor, cut_sheet_id) -> CutSheet:
    """Fetch a cut sheet the actor processes.

    Raises:
        NotFound: If it does not exist or the actor cannot see it
        NotAuthorized: If the actor can see it but is not its processor
    """
    cut_sheet = fetch_cut_sheet(cut_sheet_id)
    if cut_sheet is None or not can_view(actor, cut_sheet):
        raise NotFound('Cut sheet', cut_sheet_id)
    if not is_assigned_processor(actor, cut_sheet):
        raise NotAuthorized('Only the assigned processor can change this cut sheet')
    return cut_sheet


def get_cut_sheet_for_owner(actor, cut_sheet_id) -> CutSheet:
    """Fetch a cut sheet owned by the actor's producer organization."""
    cut_sheet = fetch_cut_sheet(cut_sheet_id)
    if cut_sheet is None or not can_view(actor, cut_sheet):
        raise NotFound('Cut sheet', cut_sheet_id)
    if not is_owner(actor, cut_sheet):
        raise NotAuthorized('Only the producer can change this cut sheet')
    return cut_sheet
