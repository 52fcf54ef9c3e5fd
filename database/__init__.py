"""
Database module for the budget system.
Provides SQLAlchemy models, connection management and the quote storage.
"""

from .connection import DatabaseManager
from .interfaces import QuoteStorage
from .operations import DatabaseOperations
from .models import Base, QuoteDB, LineItemDB, PaymentDB

__all__ = [
    'DatabaseManager',
    'QuoteStorage',
    'DatabaseOperations',
    'Base',
    'QuoteDB',
    'LineItemDB',
    'PaymentDB',
]
