"""
pytest configuration and fixtures for Budget System tests
"""

import pytest
import tempfile
import shutil
from pathlib import Path
import sys

from fastapi.testclient import TestClient

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from database.connection import DatabaseManager
from database.operations import DatabaseOperations
from budget_manager import BudgetManager
from tests.mocks import InMemoryQuoteStorage


@pytest.fixture(scope="session")
def test_config():
    """Test configuration fixture"""
    return {
        "database": {
            "url": "sqlite:///:memory:",
            "echo": False
        },
        "logging": {
            "level": "WARNING",  # Reduce noise in tests
            "console_enabled": False
        },
        "api": {
            "host": "127.0.0.1",
            "port": 8001,  # Different port for tests
            "cors_origins": ["http://localhost:3000"]
        }
    }


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def test_database(test_config):
    """Create an in-memory test database"""
    connection = DatabaseManager(test_config["database"]["url"], echo=test_config["database"]["echo"])
    connection.initialize()
    connection.create_tables()

    yield connection

    connection.close()


@pytest.fixture
def storage(test_database):
    """SQLAlchemy storage over the test database"""
    return DatabaseOperations(test_database)


@pytest.fixture
def memory_storage():
    """In-memory storage fake"""
    return InMemoryQuoteStorage()


@pytest.fixture
def manager(storage):
    """BudgetManager backed by the test database"""
    return BudgetManager(storage=storage)


@pytest.fixture
def client(manager):
    """FastAPI test client using the test BudgetManager"""
    from api.app import app
    from api.routes import get_budget_manager

    app.dependency_overrides[get_budget_manager] = lambda: manager
    yield TestClient(app)
    app.dependency_overrides.clear()


def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
