import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("workstations", "0001_initial"),
        ("parts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="TrackingRule",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("facility_id", models.UUIDField(db_index=True)),
                (
                    "logic_operator",
                    models.CharField(
                        choices=[("AND", "All conditions (AND)"), ("OR", "Any condition (OR)")],
                        default="OR",
                        max_length=8,
                    ),
                ),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "workstation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tracking_rules",
                        to="workstations.workstation",
                    ),
                ),
            ],
            options={
                "db_table": "tracking_rule",
                "ordering": ["position", "created_at"],
            },
        ),
        migrations.CreateModel(
            name="TrackingCondition",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("column_name", models.CharField(max_length=64)),
                (
                    "operator",
                    models.CharField(
                        choices=[
                            ("equals", "Equals"),
                            ("not_equals", "Does not equal"),
                            ("contains", "Contains"),
                            ("not_contains", "Does not contain"),
                            ("starts_with", "Starts with"),
                            ("ends_with", "Ends with"),
                            ("is_empty", "Is empty"),
                            ("is_not_empty", "Is not empty"),
                            ("greater_than", "Greater than"),
                            ("less_than", "Less than"),
                        ],
                        max_length=32,
                    ),
                ),
                ("value", models.CharField(blank=True, max_length=255, null=True)),
                ("position", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "rule",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="conditions",
                        to="tracking.trackingrule",
                    ),
                ),
            ],
            options={
                "db_table": "tracking_condition",
                "ordering": ["position", "created_at"],
            },
        ),
        migrations.CreateModel(
            name="PartWorkstationTracking",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("facility_id", models.UUIDField(db_index=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("in_progress", "In progress"), ("completed", "Completed")],
                        db_index=True,
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "part",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="workstation_tracking",
                        to="parts.part",
                    ),
                ),
                (
                    "workstation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="part_tracking",
                        to="workstations.workstation",
                    ),
                ),
            ],
            options={
                "db_table": "tracking_part_workstation",
            },
        ),
        migrations.AddIndex(
            model_name="trackingrule",
            index=models.Index(fields=["tenant_id", "facility_id", "workstation"], name="trackrule_scope_ws_idx"),
        ),
        migrations.AddConstraint(
            model_name="partworkstationtracking",
            constraint=models.UniqueConstraint(fields=("part", "workstation"), name="uq_tracking_part_workstation"),
        ),
        migrations.AddIndex(
            model_name="partworkstationtracking",
            index=models.Index(fields=["workstation", "status"], name="tracking_ws_status_idx"),
        ),
    ]
