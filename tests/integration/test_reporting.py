"""
Integration tests for the reporting summaries.
"""

from datetime import date
from decimal import Decimal

import pytest

from txn_cleaning.batch.pipeline import CleaningPipeline
from txn_cleaning.batch.readers import TransactionReader
from txn_cleaning.reporting import TransactionReport


@pytest.fixture
def report(spark_test_session, dirty_csv_path):
    raw_df = TransactionReader(spark_test_session).read(dirty_csv_path)
    cleaned_df, _ = CleaningPipeline(spark_test_session).clean_dataframe(raw_df)
    return TransactionReport(cleaned_df)


@pytest.mark.integration
class TestTransactionReport:
    """Tests for TransactionReport"""

    def test_overview(self, report):
        row = report.overview().collect()[0]

        assert row.total_transactions == 4
        assert row.distinct_transactions == 4
        assert row.unique_customers == 4
        assert row.earliest_date == date(2024, 1, 1)
        assert row.latest_date == date(2024, 1, 5)
        assert row.max_transaction_value == Decimal("55.00")
        assert row.price_problem_count == 1

    def test_category_distribution(self, report):
        rows = report.category_distribution().collect()

        assert [row.main_category for row in rows] == ["Electronics", "Furniture", "Books"]
        assert rows[0].total_revenue == Decimal("64.99")
        assert rows[0].transaction_count == 2

    def test_customer_analysis(self, report):
        rows = {row.customer_type: row for row in report.customer_analysis().collect()}

        assert set(rows) == {"B2C", "B2B", "UNKNOWN"}
        assert rows["B2C"].total_revenue == Decimal("64.99")
        assert rows["UNKNOWN"].transaction_count == 1

    def test_hourly_patterns(self, report):
        assert [row.transaction_hour for row in report.hourly_patterns().collect()] == [7, 8, 9, 10]

    def test_daily_patterns(self, report):
        assert [row.transaction_day_of_week for row in report.daily_patterns().collect()] == [2, 3, 4, 6]

    def test_sections(self, report):
        assert [title for title, _ in report.sections()] == [
            "Transaction metrics",
            "Category distribution",
            "Customer analysis",
            "Hourly patterns",
            "Daily patterns",
        ]

    def test_log_summary(self, report):
        report.log_summary()
