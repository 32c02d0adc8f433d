"""
Pytest configuration and fixtures for the transaction cleaning tests

Unit tests run on plain Python records; integration and e2e tests share a
local Spark session.
"""
import os
import pytest
from typing import Generator
from pyspark.sql import SparkSession


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require Spark"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that run on a local Spark session"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that test the full pipeline"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# SPARK FIXTURES
# =======================

@pytest.fixture(scope="session")
def spark_session() -> Generator[SparkSession, None, None]:
    """
    Create a Spark session for testing with local mode

    Yields:
        SparkSession configured for local testing
    """
    spark = (
        SparkSession.builder
        .appName("txn-cleaning-test")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.sql.session.timeZone", "UTC")
        .config("spark.driver.memory", "1g")
        .config("spark.ui.enabled", "false")
        .config("spark.sql.warehouse.dir", "/tmp/spark-warehouse")
        .getOrCreate()
    )

    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


@pytest.fixture(scope="function")
def spark_test_session(spark_session) -> SparkSession:
    """
    Function-scoped Spark session that clears cached data between tests
    """
    spark_session.catalog.clearCache()
    return spark_session


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_data_dir() -> str:
    """
    Path to the tests/fixtures directory
    """
    return os.path.join(os.path.dirname(__file__), "fixtures")


@pytest.fixture(scope="session")
def dirty_csv_path(test_data_dir) -> str:
    """
    Path to the dirty transactions CSV fixture
    """
    return os.path.join(test_data_dir, "dirty_transactions.csv")


# =======================
# RECORD FIXTURES
# =======================

def make_raw(**overrides) -> dict:
    """A complete, valid raw transaction with selected fields overridden."""
    raw = {
        "transaction_id": "T1",
        "timestamp": "2024-01-01T10:00:00",
        "customer_id": "C1",
        "customer_name": "  jane doe ",
        "city": " new york",
        "customer_type": " b2c ",
        "product_name": " Widget ",
        "category": "Electronics > Phones > Accessories",
        "price": 3.33,
        "quantity": 3,
        "total_amount": 9.99,
    }
    raw.update(overrides)
    return raw


@pytest.fixture(scope="session")
def raw_factory():
    """Factory fixture building raw transactions (see make_raw)."""
    return make_raw
