"""
Per-field normalization of raw transaction records.

Each field rule runs on its own: a value that is missing or fails its rule
becomes ``None`` for that field only and never aborts the row.
"""

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping

from txn_cleaning.core.models import CleaningPolicy, NormalizedRecord
from txn_cleaning.core.validators import RangeValidator, TypeValidator, ValidationError

CENTS = Decimal("0.01")

# quantity is stored as a signed 64-bit integer
MAX_QUANTITY = 2**63 - 1

_DEFAULT_POLICY = CleaningPolicy()

_DECIMAL = TypeValidator("amount", {"expected_type": "decimal"})
_POSITIVE = RangeValidator("amount", {"min_exclusive": 0})


def round_money(value: Decimal | None) -> Decimal | None:
    """Round half-up to two decimal places; None if the value is too large to round."""
    if value is None:
        return None
    try:
        return value.quantize(CENTS, rounding=ROUND_HALF_UP)
    except ArithmeticError:
        return None


def parse_timestamp(value: Any, formats: list[str] | tuple[str, ...] = ()) -> datetime | None:
    """
    Parse a raw timestamp into a naive UTC datetime.

    Accepts datetime and date objects, ISO-8601 text and any of the given
    strptime formats. Returns None when nothing matches.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        parsed = None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            for fmt in formats:
                try:
                    parsed = datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def clean_text(value: Any) -> str | None:
    """Trim surrounding whitespace; blank text is absent."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def clean_identifier(value: Any) -> str | None:
    """Identifier as text, unchanged; blank identifiers are absent."""
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def initcap(text: str | None) -> str | None:
    """Upper-case the first letter of each space-separated word, lower-case the rest."""
    if text is None:
        return None
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


def split_category(value: Any, delimiter: str = ">") -> tuple[str | None, str | None]:
    """
    Split a category path into (main_category, sub_category).

    Segments past the second are ignored; empty segments are absent.
    """
    text = clean_text(value)
    if text is None:
        return None, None

    segments = text.split(delimiter)
    main_category = clean_text(segments[0])
    sub_category = clean_text(segments[1]) if len(segments) > 1 else None
    return main_category, sub_category


def to_decimal(value: Any) -> Decimal | None:
    """Coerce a raw numeric value to Decimal, or None when it cannot be."""
    try:
        return _DECIMAL.coerce(value)
    except ValidationError:
        return None


def positive_or_none(value: Decimal | None) -> Decimal | None:
    """Keep strictly positive values only."""
    try:
        _POSITIVE.validate(value, {})
    except ValidationError:
        return None
    return value


def normalize_quantity(value: Decimal | None) -> int | None:
    """Whole, strictly positive quantity that fits in 64 bits, or None."""
    value = positive_or_none(value)
    if value is None or value != value.to_integral_value() or value > MAX_QUANTITY:
        return None
    return int(value)


def price_calculation_diff(
    price: Decimal | None,
    quantity: Decimal | None,
    total_amount: Decimal | None,
) -> Decimal | None:
    """|round(price * quantity, 2) - total_amount| over the raw values."""
    if price is None or quantity is None or total_amount is None:
        return None
    try:
        rounded = round_money(price * quantity)
    except ArithmeticError:
        return None
    if rounded is None:
        return None
    return abs(rounded - total_amount)


def normalize_record(
    raw: Mapping[str, Any],
    source_row: int = 0,
    policy: CleaningPolicy | None = None,
) -> NormalizedRecord:
    """
    Normalize one raw transaction record.

    Args:
        raw: Raw field name -> value mapping
        source_row: Ingestion ordinal of the record
        policy: Cleaning policy (defaults when None)

    Returns:
        NormalizedRecord with None for every missing or invalid field
    """
    policy = policy or _DEFAULT_POLICY

    timestamp = parse_timestamp(raw.get("timestamp"), policy.timestamp_formats)
    main_category, sub_category = split_category(raw.get("category"), policy.category_delimiter)
    customer_type = clean_text(raw.get("customer_type"))

    raw_price = to_decimal(raw.get("price"))
    raw_quantity = to_decimal(raw.get("quantity"))
    raw_total = to_decimal(raw.get("total_amount"))

    unit_price = positive_or_none(raw_price)
    total_amount = positive_or_none(raw_total)

    return NormalizedRecord(
        transaction_id=clean_identifier(raw.get("transaction_id")),
        transaction_timestamp=timestamp,
        transaction_date=timestamp.date() if timestamp is not None else None,
        customer_id=clean_identifier(raw.get("customer_id")),
        customer_name=initcap(clean_text(raw.get("customer_name"))),
        city=initcap(clean_text(raw.get("city"))),
        customer_type=customer_type.upper() if customer_type is not None else None,
        product_name=clean_text(raw.get("product_name")),
        main_category=main_category,
        sub_category=sub_category,
        unit_price=round_money(unit_price),
        quantity=normalize_quantity(raw_quantity),
        total_amount=round_money(total_amount),
        price_calculation_diff=price_calculation_diff(raw_price, raw_quantity, raw_total),
        source_row=source_row,
    )
