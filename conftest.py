"""
Global pytest configuration and fixtures.
"""
import os
import pytest
from typing import Dict
from billing_records.config import BillingRecordsConfig, reload_config, reset_logging
from billing_records.models import User
from billing_records.repositories import InMemoryBillingRepository, ReferenceData
from billing_records.services import BillingImportService, BillingService


@pytest.fixture
def test_env_vars(tmp_path) -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'ENVIRONMENT': 'testing',
        'DEBUG': 'false',
        'LOG_LEVEL': 'WARNING',
        'BILLING_DATA_FILE': str(tmp_path / 'data' / 'billing_records.json'),
        'EXPORT_DIR': str(tmp_path / 'exports'),
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key in ('REFERENCE_DATA_FILE', 'CSV_DELIMITER', 'SKIPPED_ROW_PREVIEW_LENGTH',
                'LOG_FORMAT', 'LOG_FILE'):
        monkeypatch.delenv(key, raising=False)
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)

    # Clear the global config to force reload with test values
    import billing_records.config.settings
    billing_records.config.settings._config = None

    yield test_env_vars

    # Clean up
    billing_records.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> BillingRecordsConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def sample_users():
    """Two employees used across the import examples."""
    return [
        User(id='u1', username='employee1', first_name='John', last_name='Doe',
             email='john.doe@example.com'),
        User(id='u2', username='employee2', first_name='Jane', last_name='Smith'),
    ]


@pytest.fixture
def reference_data(sample_users) -> ReferenceData:
    """Sample projects plus the two sample employees."""
    return ReferenceData.default(users=sample_users)


@pytest.fixture
def repository() -> InMemoryBillingRepository:
    """Empty in-memory record store."""
    return InMemoryBillingRepository()


@pytest.fixture
def billing_service(repository, reference_data) -> BillingService:
    """Billing service over the in-memory store."""
    return BillingService(repository, reference_data)


@pytest.fixture
def import_service(billing_service, reference_data) -> BillingImportService:
    """Import service creating records through the billing service."""
    return BillingImportService(billing_service, reference_data)


@pytest.fixture
def import_csv_header() -> str:
    """Header row with every import column."""
    return (
        'employeeIdentifier,projectIdentifier,clientName,date,status,isCountBased,'
        'hoursBilled,rateApplied,calculatedAmount,achievedCountTotal,'
        'countMetricLabelUsed,notes'
    )


@pytest.fixture
def sample_import_csv(import_csv_header) -> str:
    """One hourly and one count-based row, as in the import template."""
    return '\n'.join([
        import_csv_header,
        'employee1,proj1,Client Alpha,2023-10-25,pending,false,8,75,,,,Hourly work example',
        'employee2,proj3,Client Beta,2023-10-26,pending,true,,,125,250,,Count-based work example',
    ])


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Remove handlers installed by configure_logging during a test."""
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def cleanup_test_files():
    """Clean up any test files created during testing."""
    yield

    # Remove test coverage files in case they're created
    test_files = ['coverage.xml', '.coverage']
    for file in test_files:
        if os.path.exists(file):
            os.remove(file)


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "cli: mark test as exercising the command-line interface"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        path = str(item.fspath)
        # Add unit marker for tests in tests/unit/
        if "tests/unit/" in path:
            item.add_marker(pytest.mark.unit)

        # Add integration marker for tests in tests/integration/
        elif "tests/integration/" in path:
            item.add_marker(pytest.mark.integration)

        if "tests/unit/cli/" in path:
            item.add_marker(pytest.mark.cli)
