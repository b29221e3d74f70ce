import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _text(max_length):
    return models.CharField(blank=True, max_length=max_length, null=True)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("projects", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PartsList",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("facility_id", models.UUIDField(db_index=True)),
                ("file_name", models.CharField(blank=True, default="", max_length=255)),
                ("imported_at", models.DateTimeField(auto_now_add=True)),
                (
                    "imported_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="imported_parts_lists",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="parts_lists",
                        to="projects.project",
                    ),
                ),
            ],
            options={
                "db_table": "parts_parts_list",
            },
        ),
        migrations.CreateModel(
            name="Part",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("facility_id", models.UUIDField(db_index=True)),
                ("row_number", models.PositiveIntegerField(default=0)),
                ("materiaal", _text(255)),
                ("dikte", _text(64)),
                ("nerf", _text(64)),
                ("lengte", _text(64)),
                ("breedte", _text(64)),
                ("aantal", models.IntegerField(blank=True, null=True)),
                ("cnc_pos", _text(128)),
                ("wand_naam", _text(255)),
                ("afplak_boven", _text(128)),
                ("afplak_onder", _text(128)),
                ("afplak_links", _text(128)),
                ("afplak_rechts", _text(128)),
                ("commentaar", models.TextField(blank=True, null=True)),
                ("commentaar_2", models.TextField(blank=True, null=True)),
                ("cncprg1", _text(255)),
                ("cncprg2", _text(255)),
                ("abd", _text(128)),
                ("afbeelding", _text(512)),
                ("doorlopende_nerf", _text(64)),
                (
                    "color_status",
                    models.CharField(
                        choices=[("none", "None"), ("green", "Green"), ("orange", "Orange"), ("red", "Red")],
                        default="none",
                        max_length=16,
                    ),
                ),
                (
                    "parts_list",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="parts",
                        to="parts.partslist",
                    ),
                ),
            ],
            options={
                "db_table": "parts_part",
                "ordering": ["row_number"],
            },
        ),
        migrations.AddIndex(
            model_name="partslist",
            index=models.Index(fields=["tenant_id", "facility_id", "project"], name="partslist_scope_project_idx"),
        ),
        migrations.AddIndex(
            model_name="part",
            index=models.Index(fields=["parts_list", "row_number"], name="part_list_row_idx"),
        ),
    ]
