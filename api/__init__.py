"""
API module for the budget system.
Provides FastAPI-based REST API for quotes, line items and payments.
"""

__all__ = ['app', 'routes', 'models', 'middleware']
