"""
GovServe Django ORM Adapter
===========================
Relational persistence for orders and promo codes.
Implements engines.orders.repository.OrderRepository.
"""
