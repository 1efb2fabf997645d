"""Choice enums shared by models, services and the taxonomy.

These values are persisted and appear in history snapshots. Do not rename
existing members; add new ones instead.
"""
from django.db import models


class AnimalType(models.TextChoices):
    BEEF = 'beef', 'Beef'
    PORK = 'pork', 'Pork'
    LAMB = 'lamb', 'Lamb'
    GOAT = 'goat', 'Goat'


class ActorRole(models.TextChoices):
    """Organization type of the principal performing a change."""

    PRODUCER = 'producer', 'Producer'
    PROCESSOR = 'processor', 'Processor'


class ChangeType(models.TextChoices):
    CREATED = 'created', 'Created'
    UPDATED = 'updated', 'Updated'
    STATUS_CHANGED = 'status_changed', 'Status Changed'


class ChangeCategory(models.TextChoices):
    INITIAL_CREATION = 'initial_creation', 'Created'
    CUT_ADDED = 'cut_added', 'Cut Added'
    CUT_REMOVED = 'cut_removed', 'Cut Removed'
    CUT_MODIFIED = 'cut_modified', 'Cut Modified'
    WEIGHT_ENTERED = 'weight_entered', 'Weight Entered'
    PACKAGE_CREATED = 'package_created', 'Package Created'
    NOTES_UPDATED = 'notes_updated', 'Notes Updated'
    GENERAL = 'general', 'General'


class CutSheetStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    SUBMITTED = 'submitted', 'Submitted'
    CONFIRMED = 'confirmed', 'Confirmed'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETE = 'complete', 'Complete'


class GroundType(models.TextChoices):
    BULK = 'bulk', 'Bulk'
    VACUUM = 'vacuum', 'Vacuum Packed'
    PATTIES = 'patties', 'Patties'


class PattySize(models.TextChoices):
    QUARTER = '1/4', '1/4 lb'
    THIRD = '1/3', '1/3 lb'
    HALF = '1/2', '1/2 lb'


class BaconOrBelly(models.TextChoices):
    BACON = 'bacon', 'Bacon'
    FRESH_BELLY = 'fresh_belly', 'Fresh Belly'
    BOTH = 'both', 'Both'
    NONE = 'none', 'None'


class CutPreference(models.TextChoices):
    """Sliced-or-roast preference used for pork ham and shoulder."""

    SLICED = 'sliced', 'Sliced'
    ROAST = 'roast', 'Roast'
    BOTH = 'both', 'Both'
    NONE = 'none', 'None'


class CutCategory(models.TextChoices):
    STEAK = 'steak', 'Steak'
    ROAST = 'roast', 'Roast'
    GROUND = 'ground', 'Ground'
    RIBS = 'ribs', 'Ribs'
    BACON = 'bacon', 'Bacon'
    SAUSAGE = 'sausage', 'Sausage'
    OTHER = 'other', 'Other'


ORGAN_FIELDS = ('liver', 'heart', 'tongue', 'kidneys', 'oxtail', 'bones')
