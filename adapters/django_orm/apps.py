"""
GovServe Django ORM Adapter - App Configuration
===============================================
Order and promo code tables.
"""

from django.apps import AppConfig


class OrdersOrmConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "adapters.django_orm"
    label = "orders_orm"
    verbose_name = "GovServe Orders"
