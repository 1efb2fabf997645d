"""Signals sent by django-cutsheets.

cut_sheet_changed is sent after every history entry is written. It is the
hook for notifications and realtime fan-out; receivers run via send_robust,
so a failing receiver is logged and never changes the operation's result.

    from django.dispatch import receiver
    from django_cutsheets.signals import cut_sheet_changed

    @receiver(cut_sheet_changed)
    def notify_producer(sender, entry, **kwargs):
        ...
"""
import logging

from django.dispatch import Signal

logger = logging.getLogger(__name__)

# Arguments: entry (CutSheetHistory)
cut_sheet_changed = Signal()


def send_cut_sheet_changed(entry) -> None:
    """Send cut_sheet_changed for ``entry``, logging receiver failures."""
    responses = cut_sheet_changed.send_robust(sender=entry.__class__, entry=entry)
    for receiver, response in responses:
        if isinstance(response, Exception):
            logger.warning(
                "cut_sheet_changed receiver %r failed for cut sheet %s: %s",
                receiver, entry.cut_sheet_id, response,
            )
