"""Persistence layer for Strata.

This module provides:
- Async SQLAlchemy engine and session factory
- ORM tables for products and orders
- Repositories implementing the Store interface
"""

from strata.persistence.base import Store
from strata.persistence.db import close_db, get_engine, get_session, init_db
from strata.persistence.repositories import OrderRepository, ProductRepository, SqlRepository
from strata.persistence.tables import Base, OrderTable, ProductTable

__all__ = [
    # DB
    "close_db",
    "get_engine",
    "get_session",
    "init_db",
    # Tables
    "Base",
    "OrderTable",
    "ProductTable",
    # Repositories
    "OrderRepository",
    "ProductRepository",
    "SqlRepository",
    "Store",
]
