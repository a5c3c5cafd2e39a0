from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PromoCodeRecord",
            fields=[
                ("promo_id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("code", models.CharField(max_length=64, unique=True)),
                (
                    "promo_type",
                    models.CharField(
                        choices=[("PERCENT", "Percent"), ("FIXED", "Fixed")],
                        max_length=16,
                    ),
                ),
                (
                    "value",
                    models.BigIntegerField(
                        help_text="Minor units for FIXED, whole percent for PERCENT.",
                    ),
                ),
                ("currency", models.CharField(default="EGP", max_length=3)),
                ("min_order_amount", models.BigIntegerField(default=0)),
                ("max_discount", models.BigIntegerField(blank=True, null=True)),
                ("start_date", models.DateTimeField(blank=True, null=True)),
                ("end_date", models.DateTimeField(blank=True, null=True)),
                ("usage_limit", models.PositiveIntegerField(blank=True, null=True)),
                ("current_usage", models.PositiveIntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "govserve_promo_codes",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="OrderSequence",
            fields=[
                ("name", models.CharField(max_length=32, primary_key=True, serialize=False)),
                ("value", models.PositiveBigIntegerField(default=0)),
            ],
            options={
                "db_table": "govserve_order_sequences",
            },
        ),
        migrations.CreateModel(
            name="OrderRecord",
            fields=[
                ("order_id", models.CharField(max_length=32, primary_key=True, serialize=False)),
                (
                    "version",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Optimistic lock. Incremented on every save.",
                    ),
                ),
                ("variant_id", models.CharField(max_length=64)),
                ("variant_name", models.CharField(blank=True, default="", max_length=255)),
                ("base_price", models.BigIntegerField()),
                ("eta_days", models.PositiveIntegerField(default=0)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("currency", models.CharField(default="EGP", max_length=3)),
                ("customer_name", models.CharField(max_length=255)),
                ("customer_phone", models.CharField(max_length=32)),
                ("customer_email", models.CharField(blank=True, max_length=255, null=True)),
                ("customer_address", models.TextField(blank=True, null=True)),
                (
                    "delivery_type",
                    models.CharField(
                        choices=[("OFFICE", "Office"), ("HOME", "Home")],
                        max_length=16,
                    ),
                ),
                ("delivery_fee", models.BigIntegerField(default=0)),
                (
                    "fines",
                    models.TextField(
                        default="[]",
                        help_text="JSON list of {name, amount, isLostReport}.",
                    ),
                ),
                ("other_fees", models.BigIntegerField(default=0)),
                ("discount", models.BigIntegerField(default=0)),
                ("discount_amount", models.BigIntegerField(default=0)),
                ("total_amount", models.BigIntegerField(default=0)),
                ("paid_amount", models.BigIntegerField(default=0)),
                ("remaining_amount", models.BigIntegerField(default=0)),
                ("recorded_promo_ids", models.JSONField(blank=True, default=list)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("IN_PROGRESS", "In Progress"),
                            ("UNDER_REVIEW", "Under Review"),
                            ("COMPLETED", "Completed"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                ("requires_review", models.BooleanField(default=False)),
                ("review_notes", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "promo",
                    models.ForeignKey(
                        blank=True,
                        db_column="promo_id",
                        null=True,
                        on_delete=models.deletion.PROTECT,
                        related_name="orders",
                        to="orders_orm.promocoderecord",
                    ),
                ),
            ],
            options={
                "db_table": "govserve_orders",
                "ordering": ["created_at", "order_id"],
                "indexes": [
                    models.Index(
                        fields=["status", "created_at"], name="idx_order_status_created",
                    ),
                ],
            },
        ),
    ]
