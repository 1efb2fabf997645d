"""Django Cutsheets configuration.

All settings can be overridden in your Django settings.py and are read on
every call, so ``override_settings`` works in tests.

Example:
    # settings.py
    CUTSHEETS_ATOMIC_HISTORY = True
    CUTSHEETS_ACTOR_RESOLVER = 'accounts.cutsheets.resolve_actor'
"""

from django.conf import settings


DEFAULTS = {
    # True: document write and history insert share one transaction.
    # False: history is written after the document write; a failed history
    # insert is logged and reported as an audit gap.
    'ATOMIC_HISTORY': False,
    # Dotted path to callable(user) -> Actor | None
    'ACTOR_RESOLVER': None,
    # Attempts for package number assignment on uniqueness conflict
    'PACKAGE_NUMBER_RETRIES': 3,
    # Applied to template items stored without pieces per package
    'DEFAULT_PIECES_PER_PACKAGE': 2,
}


def get_setting(name: str, default=None):
    """Get a setting with CUTSHEETS_ prefix."""
    if default is None:
        default = DEFAULTS.get(name)
    return getattr(settings, f"CUTSHEETS_{name}", default)


def is_atomic_history() -> bool:
    return bool(get_setting('ATOMIC_HISTORY'))


# =============================================================================
# DEFAULT SETTINGS REFERENCE
# =============================================================================

# CUTSHEETS_ATOMIC_HISTORY = False
# CUTSHEETS_ACTOR_RESOLVER = None
# CUTSHEETS_PACKAGE_NUMBER_RETRIES = 3
# CUTSHEETS_DEFAULT_PIECES_PER_PACKAGE = 2
