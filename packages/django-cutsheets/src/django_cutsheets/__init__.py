"""Django Cutsheets - Cut sheet configuration and change history for meat processing orders."""

__version__ = '0.1.0'

# Lazy imports to avoid AppRegistryNotReady errors
def __getattr__(name):
    if name == 'CutSheet':
        from django_cutsheets.models import CutSheet
        return CutSheet
    if name == 'CutSheetHistory':
        from django_cutsheets.models import CutSheetHistory
        return CutSheetHistory
    if name == 'ProducedPackage':
        from django_cutsheets.models import ProducedPackage
        return ProducedPackage
    if name == 'ProcessorCutConfig':
        from django_cutsheets.models import ProcessorCutConfig
        return ProcessorCutConfig
    if name == 'Actor':
        from django_cutsheets.actors import Actor
        return Actor
    if name == 'CutSheetState':
        from django_cutsheets.state import CutSheetState
        return CutSheetState
    if name == 'OperationResult':
        from django_cutsheets.results import OperationResult
        return OperationResult
    if name == 'get_animal_schema':
        from django_cutsheets.taxonomy import get_animal_schema
        return get_animal_schema
    if name == 'validate_selections':
        from django_cutsheets.validation import validate_selections
        return validate_selections
    if name == 'generate_diff':
        from django_cutsheets.diff import generate_diff
        return generate_diff
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    'CutSheet',
    'CutSheetHistory',
    'ProducedPackage',
    'ProcessorCutConfig',
    'Actor',
    'CutSheetState',
    'OperationResult',
    'get_animal_schema',
    'validate_selections',
    'generate_diff',
]
