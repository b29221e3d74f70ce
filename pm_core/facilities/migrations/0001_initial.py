import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Facility",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("code", models.SlugField(max_length=64)),
                (
                    "facility_type",
                    models.CharField(
                        choices=[
                            ("PLANT", "Production plant"),
                            ("WORKSHOP", "Workshop"),
                            ("WAREHOUSE", "Warehouse"),
                            ("OTHER", "Other"),
                        ],
                        db_index=True,
                        default="PLANT",
                        max_length=24,
                    ),
                ),
                ("timezone", models.CharField(default="Europe/Brussels", max_length=64)),
                ("address_line1", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(blank=True, default="", max_length=128)),
                ("country", models.CharField(blank=True, default="", max_length=64)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "tenant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="facilities",
                        to="tenants.tenant",
                    ),
                ),
            ],
            options={
                "db_table": "facilities_facility",
                "indexes": [models.Index(fields=["tenant", "is_active"], name="facility_tenant_active_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("tenant", "code"), name="uq_facility_tenant_code"),
                ],
            },
        ),
    ]
