"""
Read-only summaries over cleaned transactions.

Consumes the cleaned output contract; nothing here feeds back into cleaning.
"""

from typing import Iterator

from pyspark.sql import Column, DataFrame
from pyspark.sql import functions as F

from txn_cleaning.observability.logger import get_logger

logger = get_logger(__name__)


def _money(column: Column) -> Column:
    return F.round(column, 2)


class TransactionReport:
    """
    Aggregate views of a cleaned transaction DataFrame.
    """

    def __init__(self, df: DataFrame):
        """
        Args:
            df: Cleaned transactions (CLEANED_SCHEMA)
        """
        self.df = df

    def overview(self) -> DataFrame:
        """Volumes, time range, transaction values and price problem count."""
        distinct_transactions = self.df.distinct().count()
        return self.df.agg(
            F.count("*").alias("total_transactions"),
            F.lit(distinct_transactions).alias("distinct_transactions"),
            F.countDistinct("customer_id").alias("unique_customers"),
            F.countDistinct("product_name").alias("unique_products"),
            F.countDistinct("main_category").alias("unique_main_categories"),
            F.min("transaction_date").alias("earliest_date"),
            F.max("transaction_date").alias("latest_date"),
            _money(F.avg("total_amount")).alias("avg_transaction_value"),
            _money(F.min("total_amount")).alias("min_transaction_value"),
            _money(F.max("total_amount")).alias("max_transaction_value"),
            F.sum(F.when(F.col("has_price_problem"), 1).otherwise(0)).alias("price_problem_count"),
        )

    def category_distribution(self) -> DataFrame:
        """Per main category, highest revenue first."""
        return self.df.groupBy("main_category").agg(
            F.count("*").alias("transaction_count"),
            F.countDistinct("customer_id").alias("unique_customers"),
            _money(F.avg("total_amount")).alias("avg_transaction_value"),
            _money(F.sum("total_amount")).alias("total_revenue"),
        ).orderBy(F.col("total_revenue").desc())

    def customer_analysis(self) -> DataFrame:
        """Per customer type, highest revenue first."""
        return self.df.groupBy("customer_type").agg(
            F.count("*").alias("transaction_count"),
            F.countDistinct("customer_id").alias("unique_customers"),
            _money(F.avg("quantity")).alias("avg_quantity"),
            _money(F.avg("total_amount")).alias("avg_transaction_value"),
            _money(F.sum("total_amount")).alias("total_revenue"),
        ).orderBy(F.col("total_revenue").desc())

    def hourly_patterns(self) -> DataFrame:
        """Per hour of day, ascending."""
        return self.df.groupBy("transaction_hour").agg(
            F.count("*").alias("transaction_count"),
            _money(F.avg("total_amount")).alias("avg_transaction_value"),
        ).orderBy("transaction_hour")

    def daily_patterns(self) -> DataFrame:
        """Per day of week (1 = Sunday), ascending."""
        return self.df.groupBy("transaction_day_of_week").agg(
            F.count("*").alias("transaction_count"),
            _money(F.avg("total_amount")).alias("avg_transaction_value"),
        ).orderBy("transaction_day_of_week")

    def sections(self) -> Iterator[tuple[str, DataFrame]]:
        """(title, DataFrame) for every summary, in display order."""
        yield "Transaction metrics", self.overview()
        yield "Category distribution", self.category_distribution()
        yield "Customer analysis", self.customer_analysis()
        yield "Hourly patterns", self.hourly_patterns()
        yield "Daily patterns", self.daily_patterns()

    def log_summary(self) -> None:
        """Log every summary row as a structured record."""
        for title, section in self.sections():
            for row in section.collect():
                logger.info(title, extra={"section": title, **row.asDict()})
