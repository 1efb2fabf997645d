"""Cut sheet models.

- ProcessorCutConfig: per-processor overlay on the static taxonomy
- CutSheet: producer's cut instructions for one order, or a reusable template
- CutSheetItem / CutSheetSausage: the producer's selections
- CutModification / RemovedCut / AddedCut: processor overlays, one row per
  (cut_sheet, cut_id); the producer's items are never edited or deleted
- CutSheetHistory: append-only change ledger
- ProducedPackage: physical output packages recorded by the processor

Organizations, users and orders live outside this package and are referenced
by id only.

NOTE: History entries are immutable. Updating or deleting one raises.
"""
import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from .choices import (
    ActorRole,
    AnimalType,
    BaconOrBelly,
    ChangeCategory,
    ChangeType,
    CutCategory,
    CutPreference,
    CutSheetStatus,
    GroundType,
    PattySize,
)


class TimeStampedUUIDModel(models.Model):
    """Abstract base with UUID primary key and created/updated timestamps."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ProcessorCutConfig(TimeStampedUUIDModel):
    """Which taxonomy options a processor offers, plus its own custom cuts.

    One row per processor organization. A processor with no row offers every
    animal and every cut (see config.DefaultCutConfig).
    """

    processor_id = models.CharField(
        max_length=64,
        unique=True,
        help_text='Processor organization id',
    )
    enabled_animals = models.JSONField(
        default=list,
        blank=True,
        help_text='Animal types this processor accepts',
    )
    disabled_cuts = models.JSONField(
        default=list,
        blank=True,
        help_text='Taxonomy cut ids this processor does not offer',
    )
    disabled_sausage_flavors = models.JSONField(default=list, blank=True)
    custom_cuts = models.JSONField(
        default=list,
        blank=True,
        help_text='[{"id", "name", "primal", "type", "additional_fee", "note"}]',
    )
    default_templates = models.JSONField(
        default=list,
        blank=True,
        help_text='[{"id", "name", "description", "cuts": [cut ids]}]',
    )
    processing_fees = models.JSONField(
        default=dict,
        blank=True,
        help_text='{cut_id: fee as a decimal string}',
    )
    min_hanging_weight = models.PositiveIntegerField(null=True, blank=True)
    max_hanging_weight = models.PositiveIntegerField(null=True, blank=True)
    producer_notes = models.TextField(null=True, blank=True)

    class Meta:
        db_table = 'processor_cut_config'
        verbose_name = 'processor cut config'
        verbose_name_plural = 'processor cut configs'

    def __str__(self):
        return f"Cut config for processor {self.processor_id}"


class CutSheet(TimeStampedUUIDModel):
    """A producer's cut instructions, anchored to an order or saved as a template."""

    processing_order_id = models.CharField(max_length=64, null=True, blank=True)
    producer_id = models.CharField(
        max_length=64,
        help_text='Owning producer organization id',
    )
    processor_id = models.CharField(
        max_length=64,
        null=True,
        blank=True,
        help_text='Assigned processor organization id (null for templates)',
    )
    created_by_user_id = models.CharField(max_length=64, blank=True, default='')

    is_template = models.BooleanField(default=False)
    template_name = models.CharField(max_length=200, null=True, blank=True)

    animal_type = models.CharField(max_length=10, choices=AnimalType.choices)
    status = models.CharField(
        max_length=20,
        choices=CutSheetStatus.choices,
        default=CutSheetStatus.DRAFT,
    )
    submitted_at = models.DateTimeField(null=True, blank=True)

    hanging_weight_lbs = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)

    ground_type = models.CharField(max_length=10, choices=GroundType.choices, null=True, blank=True)
    ground_package_weight_lbs = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    patty_size = models.CharField(max_length=5, choices=PattySize.choices, null=True, blank=True)

    # Organs
    keep_liver = models.BooleanField(default=False)
    keep_heart = models.BooleanField(default=False)
    keep_tongue = models.BooleanField(default=False)
    keep_kidneys = models.BooleanField(default=False)
    keep_oxtail = models.BooleanField(default=False)
    keep_bones = models.BooleanField(default=False)

    # Other options
    keep_stew_meat = models.BooleanField(default=False)
    keep_short_ribs = models.BooleanField(default=False)
    keep_soup_bones = models.BooleanField(default=False)

    # Pork only
    bacon_or_belly = models.CharField(max_length=20, choices=BaconOrBelly.choices, null=True, blank=True)
    ham_preference = models.CharField(max_length=10, choices=CutPreference.choices, null=True, blank=True)
    shoulder_preference = models.CharField(max_length=10, choices=CutPreference.choices, null=True, blank=True)
    keep_jowls = models.BooleanField(default=False)
    keep_fat_back = models.BooleanField(default=False)
    keep_lard_fat = models.BooleanField(default=False)

    special_instructions = models.TextField(null=True, blank=True)

    # Processor side
    processor_notes = models.TextField(null=True, blank=True)
    last_modified_by_role = models.CharField(max_length=20, choices=ActorRole.choices, blank=True, default='')
    last_modified_by_user_id = models.CharField(max_length=64, blank=True, default='')
    audit_gap_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text='Set when a change was saved but its history entry could not be written',
    )

    class Meta:
        db_table = 'cut_sheets'
        verbose_name = 'cut sheet'
        verbose_name_plural = 'cut sheets'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['processing_order_id'], name='cutsheet_order_idx'),
            models.Index(fields=['producer_id', 'is_template'], name='cutsheet_producer_tmpl_idx'),
            models.Index(fields=['processor_id'], name='cutsheet_processor_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['processing_order_id'],
                condition=models.Q(is_template=False),
                name='unique_cut_sheet_per_order',
            ),
            models.CheckConstraint(
                condition=models.Q(is_template=False) | models.Q(template_name__isnull=False),
                name='cutsheet_template_has_name',
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(is_template=False)
                    | (models.Q(processing_order_id__isnull=True) & models.Q(hanging_weight_lbs__isnull=True))
                ),
                name='cutsheet_template_has_no_order_or_weight',
            ),
        ]

    def __str__(self):
        if self.is_template:
            return f"Template '{self.template_name}' ({self.animal_type})"
        return f"Cut sheet {self.id} ({self.animal_type}, {self.status})"

    # Read-side projections of the keyed overlay rows

    @property
    def processor_modifications(self) -> dict:
        return {mod.cut_id: mod.as_dict() for mod in self.modifications.all()}

    @property
    def removed_cuts(self) -> list:
        return [removal.as_dict() for removal in self.removals.order_by('removed_at', 'cut_id')]

    @property
    def added_cuts(self) -> list:
        return [addition.as_dict() for addition in self.additions.order_by('added_at', 'cut_id')]


class CutSheetItem(TimeStampedUUIDModel):
    """One cut the producer selected. Never edited by the processor."""

    cut_sheet = models.ForeignKey(CutSheet, on_delete=models.CASCADE, related_name='items')
    cut_id = models.CharField(max_length=64)
    cut_name = models.CharField(max_length=200, blank=True, default='')
    primal_id = models.CharField(max_length=64, blank=True, default='')
    cut_category = models.CharField(max_length=10, choices=CutCategory.choices, blank=True, default='')
    thickness = models.CharField(max_length=20, null=True, blank=True)
    weight_lbs = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    pieces_per_package = models.PositiveSmallIntegerField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'cut_sheet_items'
        ordering = ['sort_order', 'created_at']

    def __str__(self):
        return f"{self.cut_name or self.cut_id}"


class CutSheetSausage(TimeStampedUUIDModel):
    """Sausage flavor and pounds (pork only)."""

    cut_sheet = models.ForeignKey(CutSheet, on_delete=models.CASCADE, related_name='sausages')
    flavor = models.CharField(max_length=30)
    pounds = models.DecimalField(max_digits=6, decimal_places=2)

    class Meta:
        db_table = 'cut_sheet_sausages'
        ordering = ['created_at', 'flavor']

    def __str__(self):
        return f"{self.flavor}: {self.pounds} lbs"


class CutModification(TimeStampedUUIDModel):
    """Processor's parameter changes for one cut (thickness, pieces, ...)."""

    cut_sheet = models.ForeignKey(CutSheet, on_delete=models.CASCADE, related_name='modifications')
    cut_id = models.CharField(max_length=64)
    values = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    modified_at = models.DateTimeField()

    class Meta:
        db_table = 'cut_sheet_modifications'
        constraints = [
            models.UniqueConstraint(fields=['cut_sheet', 'cut_id'], name='unique_modification_per_cut'),
        ]

    def as_dict(self) -> dict:
        return {**self.values, 'modified_at': self.modified_at.isoformat()}


class RemovedCut(TimeStampedUUIDModel):
    """A producer cut the processor marked as removed, with the reason."""

    cut_sheet = models.ForeignKey(CutSheet, on_delete=models.CASCADE, related_name='removals')
    cut_id = models.CharField(max_length=64)
    cut_name = models.CharField(max_length=200, blank=True, default='')
    reason = models.TextField(blank=True, default='')
    removed_at = models.DateTimeField()

    class Meta:
        db_table = 'cut_sheet_removed_cuts'
        constraints = [
            models.UniqueConstraint(fields=['cut_sheet', 'cut_id'], name='unique_removal_per_cut'),
        ]

    def as_dict(self) -> dict:
        return {
            'cut_id': self.cut_id,
            'cut_name': self.cut_name,
            'reason': self.reason,
            'removed_at': self.removed_at.isoformat(),
        }


class AddedCut(TimeStampedUUIDModel):
    """A cut the processor added on top of the producer's selections."""

    cut_sheet = models.ForeignKey(CutSheet, on_delete=models.CASCADE, related_name='additions')
    cut_id = models.CharField(max_length=64)
    cut_name = models.CharField(max_length=200)
    details = models.JSONField(
        default=dict,
        blank=True,
        encoder=DjangoJSONEncoder,
        help_text='Remaining fields of the added cut (thickness, pieces_per_package, notes, ...)',
    )
    added_at = models.DateTimeField()

    class Meta:
        db_table = 'cut_sheet_added_cuts'
        constraints = [
            models.UniqueConstraint(fields=['cut_sheet', 'cut_id'], name='unique_addition_per_cut'),
        ]

    def as_dict(self) -> dict:
        return {
            'cut_id': self.cut_id,
            'cut_name': self.cut_name,
            **self.details,
            'added_at': self.added_at.isoformat(),
        }


class CutSheetHistory(models.Model):
    """Immutable change ledger entry.

    previous_state/new_state hold only the sub-state touched by the change;
    changed_fields lists its keys. The creation entry has no previous_state.
    """

    id = models.BigAutoField(primary_key=True)
    cut_sheet = models.ForeignKey(CutSheet, on_delete=models.CASCADE, related_name='history')
    processing_order_id = models.CharField(max_length=64, null=True, blank=True)

    changed_by_user_id = models.CharField(max_length=64)
    changed_by_org_id = models.CharField(max_length=64)
    changed_by_role = models.CharField(max_length=20, choices=ActorRole.choices)

    change_type = models.CharField(max_length=20, choices=ChangeType.choices)
    change_category = models.CharField(
        max_length=20,
        choices=ChangeCategory.choices,
        default=ChangeCategory.GENERAL,
    )
    change_summary = models.TextField(blank=True, default='')

    previous_state = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    new_state = models.JSONField(default=dict, encoder=DjangoJSONEncoder)
    changed_fields = models.JSONField(default=list, blank=True)

    affected_cut_id = models.CharField(max_length=64, null=True, blank=True)
    # Not a foreign key: deleted packages stay referenced by their history
    affected_package_id = models.UUIDField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'cut_sheet_history'
        verbose_name = 'cut sheet history entry'
        verbose_name_plural = 'cut sheet history'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['cut_sheet', 'created_at'], name='cutsheet_hist_sheet_idx'),
            models.Index(fields=['cut_sheet', 'change_category'], name='cutsheet_hist_category_idx'),
            models.Index(fields=['cut_sheet', 'changed_by_role'], name='cutsheet_hist_role_idx'),
        ]

    def __str__(self):
        return f"{self.changed_by_role} {self.change_type}: {self.change_summary}"

    def save(self, *args, **kwargs):
        # History is append-only - prevent updates
        if self.pk and CutSheetHistory.objects.filter(pk=self.pk).exists():
            raise ValueError("Cut sheet history entries are immutable and cannot be updated")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Cut sheet history entries are immutable and cannot be deleted")


class ProducedPackage(TimeStampedUUIDModel):
    """A physical package produced from a cut sheet line."""

    cut_sheet = models.ForeignKey(CutSheet, on_delete=models.CASCADE, related_name='packages')
    cut_id = models.CharField(max_length=64)
    cut_name = models.CharField(max_length=200)
    primal_id = models.CharField(max_length=64, null=True, blank=True)
    package_number = models.PositiveIntegerField(help_text='1-based per (cut_sheet, cut_id)')
    quantity_in_package = models.PositiveIntegerField(default=1)
    actual_weight_lbs = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    thickness = models.CharField(max_length=20, null=True, blank=True)
    processing_style = models.CharField(max_length=50, null=True, blank=True)
    processor_added = models.BooleanField(default=False)
    processor_notes = models.TextField(null=True, blank=True)
    livestock_tracking_id = models.CharField(max_length=64, null=True, blank=True)

    class Meta:
        db_table = 'produced_packages'
        ordering = ['cut_id', 'package_number']
        constraints = [
            models.UniqueConstraint(
                fields=['cut_sheet', 'cut_id', 'package_number'],
                name='unique_package_number_per_cut',
            ),
        ]

    def __str__(self):
        return f"{self.cut_name} #{self.package_number}"
