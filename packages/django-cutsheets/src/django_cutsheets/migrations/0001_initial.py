# Generated manually for standalone django-cutsheets package

import uuid

import django.core.serializers.json
import django.db.models.deletion
from django.db import migrations, models


ROLE_CHOICES = [("producer", "Producer"), ("processor", "Processor")]
PREFERENCE_CHOICES = [("sliced", "Sliced"), ("roast", "Roast"), ("both", "Both"), ("none", "None")]


def uuid_pk():
    return models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ProcessorCutConfig",
            fields=[
                ("id", uuid_pk()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "processor_id",
                    models.CharField(help_text="Processor organization id", max_length=64, unique=True),
                ),
                (
                    "enabled_animals",
                    models.JSONField(blank=True, default=list, help_text="Animal types this processor accepts"),
                ),
                (
                    "disabled_cuts",
                    models.JSONField(
                        blank=True, default=list, help_text="Taxonomy cut ids this processor does not offer"
                    ),
                ),
                ("disabled_sausage_flavors", models.JSONField(blank=True, default=list)),
                (
                    "custom_cuts",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text='[{"id", "name", "primal", "type", "additional_fee", "note"}]',
                    ),
                ),
                (
                    "default_templates",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text='[{"id", "name", "description", "cuts": [cut ids]}]',
                    ),
                ),
                (
                    "processing_fees",
                    models.JSONField(blank=True, default=dict, help_text="{cut_id: fee as a decimal string}"),
                ),
                ("min_hanging_weight", models.PositiveIntegerField(blank=True, null=True)),
                ("max_hanging_weight", models.PositiveIntegerField(blank=True, null=True)),
                ("producer_notes", models.TextField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "processor cut config",
                "verbose_name_plural": "processor cut configs",
                "db_table": "processor_cut_config",
            },
        ),
        migrations.CreateModel(
            name="CutSheet",
            fields=[
                ("id", uuid_pk()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("processing_order_id", models.CharField(blank=True, max_length=64, null=True)),
                ("producer_id", models.CharField(help_text="Owning producer organization id", max_length=64)),
                (
                    "processor_id",
                    models.CharField(
                        blank=True,
                        help_text="Assigned processor organization id (null for templates)",
                        max_length=64,
                        null=True,
                    ),
                ),
                ("created_by_user_id", models.CharField(blank=True, default="", max_length=64)),
                ("is_template", models.BooleanField(default=False)),
                ("template_name", models.CharField(blank=True, max_length=200, null=True)),
                (
                    "animal_type",
                    models.CharField(
                        choices=[("beef", "Beef"), ("pork", "Pork"), ("lamb", "Lamb"), ("goat", "Goat")],
                        max_length=10,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("submitted", "Submitted"),
                            ("confirmed", "Confirmed"),
                            ("in_progress", "In Progress"),
                            ("complete", "Complete"),
                        ],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("submitted_at", models.DateTimeField(blank=True, null=True)),
                (
                    "hanging_weight_lbs",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True),
                ),
                (
                    "ground_type",
                    models.CharField(
                        blank=True,
                        choices=[("bulk", "Bulk"), ("vacuum", "Vacuum Packed"), ("patties", "Patties")],
                        max_length=10,
                        null=True,
                    ),
                ),
                (
                    "ground_package_weight_lbs",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True),
                ),
                (
                    "patty_size",
                    models.CharField(
                        blank=True,
                        choices=[("1/4", "1/4 lb"), ("1/3", "1/3 lb"), ("1/2", "1/2 lb")],
                        max_length=5,
                        null=True,
                    ),
                ),
                ("keep_liver", models.BooleanField(default=False)),
                ("keep_heart", models.BooleanField(default=False)),
                ("keep_tongue", models.BooleanField(default=False)),
                ("keep_kidneys", models.BooleanField(default=False)),
                ("keep_oxtail", models.BooleanField(default=False)),
                ("keep_bones", models.BooleanField(default=False)),
                ("keep_stew_meat", models.BooleanField(default=False)),
                ("keep_short_ribs", models.BooleanField(default=False)),
                ("keep_soup_bones", models.BooleanField(default=False)),
                (
                    "bacon_or_belly",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("bacon", "Bacon"),
                            ("fresh_belly", "Fresh Belly"),
                            ("both", "Both"),
                            ("none", "None"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                (
                    "ham_preference",
                    models.CharField(blank=True, choices=PREFERENCE_CHOICES, max_length=10, null=True),
                ),
                (
                    "shoulder_preference",
                    models.CharField(blank=True, choices=PREFERENCE_CHOICES, max_length=10, null=True),
                ),
                ("keep_jowls", models.BooleanField(default=False)),
                ("keep_fat_back", models.BooleanField(default=False)),
                ("keep_lard_fat", models.BooleanField(default=False)),
                ("special_instructions", models.TextField(blank=True, null=True)),
                ("processor_notes", models.TextField(blank=True, null=True)),
                (
                    "last_modified_by_role",
                    models.CharField(blank=True, choices=ROLE_CHOICES, default="", max_length=20),
                ),
                ("last_modified_by_user_id", models.CharField(blank=True, default="", max_length=64)),
                (
                    "audit_gap_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Set when a change was saved but its history entry could not be written",
                        null=True,
                    ),
                ),
            ],
            options={
                "verbose_name": "cut sheet",
                "verbose_name_plural": "cut sheets",
                "db_table": "cut_sheets",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["processing_order_id"], name="cutsheet_order_idx"),
                    models.Index(fields=["producer_id", "is_template"], name="cutsheet_producer_tmpl_idx"),
                    models.Index(fields=["processor_id"], name="cutsheet_processor_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_template", False)),
                        fields=("processing_order_id",),
                        name="unique_cut_sheet_per_order",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("is_template", False), ("template_name__isnull", False), _connector="OR"),
                        name="cutsheet_template_has_name",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("is_template", False),
                            models.Q(("processing_order_id__isnull", True), ("hanging_weight_lbs__isnull", True)),
                            _connector="OR",
                        ),
                        name="cutsheet_template_has_no_order_or_weight",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CutSheetItem",
            fields=[
                ("id", uuid_pk()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("cut_id", models.CharField(max_length=64)),
                ("cut_name", models.CharField(blank=True, default="", max_length=200)),
                ("primal_id", models.CharField(blank=True, default="", max_length=64)),
                (
                    "cut_category",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("steak", "Steak"),
                            ("roast", "Roast"),
                            ("ground", "Ground"),
                            ("ribs", "Ribs"),
                            ("bacon", "Bacon"),
                            ("sausage", "Sausage"),
                            ("other", "Other"),
                        ],
                        default="",
                        max_length=10,
                    ),
                ),
                ("thickness", models.CharField(blank=True, max_length=20, null=True)),
                ("weight_lbs", models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ("pieces_per_package", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("sort_order", models.PositiveIntegerField(default=0)),
                (
                    "cut_sheet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="django_cutsheets.cutsheet",
                    ),
                ),
            ],
            options={
                "db_table": "cut_sheet_items",
                "ordering": ["sort_order", "created_at"],
            },
        ),
        migrations.CreateModel(
            name="CutSheetSausage",
            fields=[
                ("id", uuid_pk()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("flavor", models.CharField(max_length=30)),
                ("pounds", models.DecimalField(decimal_places=2, max_digits=6)),
                (
                    "cut_sheet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sausages",
                        to="django_cutsheets.cutsheet",
                    ),
                ),
            ],
            options={
                "db_table": "cut_sheet_sausages",
                "ordering": ["created_at", "flavor"],
            },
        ),
        migrations.CreateModel(
            name="CutModification",
            fields=[
                ("id", uuid_pk()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("cut_id", models.CharField(max_length=64)),
                (
                    "values",
                    models.JSONField(
                        blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder
                    ),
                ),
                ("modified_at", models.DateTimeField()),
                (
                    "cut_sheet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="modifications",
                        to="django_cutsheets.cutsheet",
                    ),
                ),
            ],
            options={
                "db_table": "cut_sheet_modifications",
                "constraints": [
                    models.UniqueConstraint(fields=("cut_sheet", "cut_id"), name="unique_modification_per_cut"),
                ],
            },
        ),
        migrations.CreateModel(
            name="RemovedCut",
            fields=[
                ("id", uuid_pk()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("cut_id", models.CharField(max_length=64)),
                ("cut_name", models.CharField(blank=True, default="", max_length=200)),
                ("reason", models.TextField(blank=True, default="")),
                ("removed_at", models.DateTimeField()),
                (
                    "cut_sheet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="removals",
                        to="django_cutsheets.cutsheet",
                    ),
                ),
            ],
            options={
                "db_table": "cut_sheet_removed_cuts",
                "constraints": [
                    models.UniqueConstraint(fields=("cut_sheet", "cut_id"), name="unique_removal_per_cut"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AddedCut",
            fields=[
                ("id", uuid_pk()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("cut_id", models.CharField(max_length=64)),
                ("cut_name", models.CharField(max_length=200)),
                (
                    "details",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        help_text="Remaining fields of the added cut (thickness, pieces_per_package, notes, ...)",
                    ),
                ),
                ("added_at", models.DateTimeField()),
                (
                    "cut_sheet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="additions",
                        to="django_cutsheets.cutsheet",
                    ),
                ),
            ],
            options={
                "db_table": "cut_sheet_added_cuts",
                "constraints": [
                    models.UniqueConstraint(fields=("cut_sheet", "cut_id"), name="unique_addition_per_cut"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CutSheetHistory",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("processing_order_id", models.CharField(blank=True, max_length=64, null=True)),
                ("changed_by_user_id", models.CharField(max_length=64)),
                ("changed_by_org_id", models.CharField(max_length=64)),
                ("changed_by_role", models.CharField(choices=ROLE_CHOICES, max_length=20)),
                (
                    "change_type",
                    models.CharField(
                        choices=[
                            ("created", "Created"),
                            ("updated", "Updated"),
                            ("status_changed", "Status Changed"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "change_category",
                    models.CharField(
                        choices=[
                            ("initial_creation", "Created"),
                            ("cut_added", "Cut Added"),
                            ("cut_removed", "Cut Removed"),
                            ("cut_modified", "Cut Modified"),
                            ("weight_entered", "Weight Entered"),
                            ("package_created", "Package Created"),
                            ("notes_updated", "Notes Updated"),
                            ("general", "General"),
                        ],
                        default="general",
                        max_length=20,
                    ),
                ),
                ("change_summary", models.TextField(blank=True, default="")),
                (
                    "previous_state",
                    models.JSONField(blank=True, encoder=django.core.serializers.json.DjangoJSONEncoder, null=True),
                ),
                (
                    "new_state",
                    models.JSONField(default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder),
                ),
                ("changed_fields", models.JSONField(blank=True, default=list)),
                ("affected_cut_id", models.CharField(blank=True, max_length=64, null=True)),
                ("affected_package_id", models.UUIDField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "cut_sheet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="history",
                        to="django_cutsheets.cutsheet",
                    ),
                ),
            ],
            options={
                "verbose_name": "cut sheet history entry",
                "verbose_name_plural": "cut sheet history",
                "db_table": "cut_sheet_history",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["cut_sheet", "created_at"], name="cutsheet_hist_sheet_idx"),
                    models.Index(fields=["cut_sheet", "change_category"], name="cutsheet_hist_category_idx"),
                    models.Index(fields=["cut_sheet", "changed_by_role"], name="cutsheet_hist_role_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProducedPackage",
            fields=[
                ("id", uuid_pk()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("cut_id", models.CharField(max_length=64)),
                ("cut_name", models.CharField(max_length=200)),
                ("primal_id", models.CharField(blank=True, max_length=64, null=True)),
                ("package_number", models.PositiveIntegerField(help_text="1-based per (cut_sheet, cut_id)")),
                ("quantity_in_package", models.PositiveIntegerField(default=1)),
                (
                    "actual_weight_lbs",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True),
                ),
                ("thickness", models.CharField(blank=True, max_length=20, null=True)),
                ("processing_style", models.CharField(blank=True, max_length=50, null=True)),
                ("processor_added", models.BooleanField(default=False)),
                ("processor_notes", models.TextField(blank=True, null=True)),
                ("livestock_tracking_id", models.CharField(blank=True, max_length=64, null=True)),
                (
                    "cut_sheet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="packages",
                        to="django_cutsheets.cutsheet",
                    ),
                ),
            ],
            options={
                "db_table": "produced_packages",
                "ordering": ["cut_id", "package_number"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("cut_sheet", "cut_id", "package_number"),
                        name="unique_package_number_per_cut",
                    ),
                ],
            },
        ),
    ]
