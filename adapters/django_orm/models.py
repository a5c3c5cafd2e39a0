"""
GovServe Django ORM Adapter - Relational Order State
====================================================
Rows mirror engines.orders.models. Money columns hold integer
minor units; currency is stored once per row.

This file contains NO business logic. Pricing, promo validation
and transitions live in engines.orders.
"""

from __future__ import annotations

from django.db import models


class OrderStatusChoice(models.TextChoices):
    PENDING = "PENDING", "Pending"
    IN_PROGRESS = "IN_PROGRESS", "In Progress"
    UNDER_REVIEW = "UNDER_REVIEW", "Under Review"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"


class DeliveryTypeChoice(models.TextChoices):
    OFFICE = "OFFICE", "Office"
    HOME = "HOME", "Home"


class PromoTypeChoice(models.TextChoices):
    PERCENT = "PERCENT", "Percent"
    FIXED = "FIXED", "Fixed"


class PromoCodeRecord(models.Model):
    promo_id = models.CharField(primary_key=True, max_length=64)
    code = models.CharField(max_length=64, unique=True)
    promo_type = models.CharField(max_length=16, choices=PromoTypeChoice.choices)
    value = models.BigIntegerField(
        help_text="Minor units for FIXED, whole percent for PERCENT.",
    )
    currency = models.CharField(max_length=3, default="EGP")
    min_order_amount = models.BigIntegerField(default=0)
    max_discount = models.BigIntegerField(null=True, blank=True)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    current_usage = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "govserve_promo_codes"
        ordering = ["code"]

    def __str__(self) -> str:
        return f"{self.code} ({self.promo_type} {self.value})"


class OrderSequence(models.Model):
    name = models.CharField(primary_key=True, max_length=32)
    value = models.PositiveBigIntegerField(default=0)

    class Meta:
        db_table = "govserve_order_sequences"


class OrderRecord(models.Model):
    # ── Identity ──────────────────────────────────────────────
    order_id = models.CharField(primary_key=True, max_length=32)
    version = models.PositiveIntegerField(
        default=0,
        help_text="Optimistic lock. Incremented on every save.",
    )

    # ── Service variant snapshot ──────────────────────────────
    variant_id = models.CharField(max_length=64)
    variant_name = models.CharField(max_length=255, default="", blank=True)
    base_price = models.BigIntegerField()
    eta_days = models.PositiveIntegerField(default=0)
    quantity = models.PositiveIntegerField(default=1)
    currency = models.CharField(max_length=3, default="EGP")

    # ── Customer ──────────────────────────────────────────────
    customer_name = models.CharField(max_length=255)
    customer_phone = models.CharField(max_length=32)
    customer_email = models.CharField(max_length=255, null=True, blank=True)
    customer_address = models.TextField(null=True, blank=True)

    # ── Charges ───────────────────────────────────────────────
    delivery_type = models.CharField(max_length=16, choices=DeliveryTypeChoice.choices)
    delivery_fee = models.BigIntegerField(default=0)
    fines = models.TextField(
        default="[]",
        help_text="JSON list of {name, amount, isLostReport}.",
    )
    other_fees = models.BigIntegerField(default=0)
    discount = models.BigIntegerField(default=0)
    promo = models.ForeignKey(
        PromoCodeRecord,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="orders",
        db_column="promo_id",
    )
    discount_amount = models.BigIntegerField(default=0)

    # ── Totals & payments ─────────────────────────────────────
    total_amount = models.BigIntegerField(default=0)
    paid_amount = models.BigIntegerField(default=0)
    remaining_amount = models.BigIntegerField(default=0)
    recorded_promo_ids = models.JSONField(default=list, blank=True)

    # ── Status ────────────────────────────────────────────────
    status = models.CharField(
        max_length=20,
        choices=OrderStatusChoice.choices,
        default=OrderStatusChoice.PENDING,
    )
    requires_review = models.BooleanField(default=False)
    review_notes = models.JSONField(default=list, blank=True)

    # ── Temporal ──────────────────────────────────────────────
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "govserve_orders"
        ordering = ["created_at", "order_id"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="idx_order_status_created"),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} ({self.status})"
