import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Project",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("facility_id", models.UUIDField(db_index=True)),
                ("code", models.CharField(max_length=64)),
                ("name", models.CharField(max_length=255)),
                ("client", models.CharField(blank=True, default="", max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PLANNED", "Planned"),
                            ("IN_PROGRESS", "In Progress"),
                            ("ON_HOLD", "On Hold"),
                            ("COMPLETED", "Completed"),
                        ],
                        db_index=True,
                        default="PLANNED",
                        max_length=32,
                    ),
                ),
                ("start_date", models.DateField(blank=True, null=True)),
                ("installation_date", models.DateField(blank=True, null=True)),
            ],
            options={
                "db_table": "projects_project",
            },
        ),
        migrations.AddConstraint(
            model_name="project",
            constraint=models.UniqueConstraint(fields=("tenant_id", "facility_id", "code"), name="uq_project_scope_code"),
        ),
        migrations.AddIndex(
            model_name="project",
            index=models.Index(fields=["tenant_id", "facility_id", "status"], name="project_scope_status_idx"),
        ),
    ]
