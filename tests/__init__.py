"""
Budget System Test Suite
========================

This package contains tests for the Budget System including:
- Unit tests for the domain records, storage, service, API and utilities
- Integration tests for complete quote workflows through the HTTP API
"""
