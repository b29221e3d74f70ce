import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Workstation",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("facility_id", models.UUIDField(db_index=True)),
                ("code", models.CharField(max_length=64)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("tracking_rules_version", models.PositiveIntegerField(default=0)),
            ],
            options={
                "db_table": "workstations_workstation",
                "ordering": ["name"],
            },
        ),
        migrations.AddConstraint(
            model_name="workstation",
            constraint=models.UniqueConstraint(fields=("tenant_id", "facility_id", "code"), name="uq_workstation_scope_code"),
        ),
        migrations.AddIndex(
            model_name="workstation",
            index=models.Index(fields=["tenant_id", "facility_id", "is_active"], name="workstation_scope_active_idx"),
        ),
    ]
