"""
Unit tests for PayPay transaction extraction.
"""
from datetime import datetime, timezone

from core.extraction import extract_transactions, row_to_transactions, split_payment_methods

from conftest import (
    COMBINED_PAYMENT_ROW,
    COMBINED_WITH_COMMA_AMOUNT_ROW,
    INCOME_ROW,
    SINGLE_PAYMENT_ROW,
    VISA_PAYMENT_ROW,
    paypay_csv,
)


def test_single_payment():
    """A plain method yields exactly one transaction."""
    result = extract_transactions(paypay_csv(SINGLE_PAYMENT_ROW))

    assert len(result.transactions) == 1
    transaction = result.transactions[0]
    assert transaction.payment_method == "PayPay残高"
    assert transaction.row["出金金額（円）"] == "190"
    assert transaction.key == "2025/10/24_-190_PayPay残高_ダミーストアA"
    assert result.stats.count == 1
    assert "取引日" in result.headers


def test_combined_payment_is_split():
    """Each method/amount entry becomes its own transaction."""
    result = extract_transactions(paypay_csv(COMBINED_PAYMENT_ROW))

    assert [t.payment_method for t in result.transactions] == ["PayPayポイント", "PayPay残高"]
    point, balance = result.transactions
    assert point.row["出金金額（円）"] == "93"
    assert point.row["取引方法"] == "PayPayポイント"
    assert point.key == "2025/09/29_-93_PayPayポイント_ダミーストアB"
    assert balance.row["出金金額（円）"] == "317"
    assert balance.key == "2025/09/29_-317_PayPay残高_ダミーストアB"
    # Passthrough columns are copied to both siblings
    assert point.row["取引番号"] == balance.row["取引番号"] == "00000000000000000002"


def test_combined_payment_with_thousands_separator():
    """Amounts like 2,599 are matched whole and cleaned."""
    result = extract_transactions(paypay_csv(COMBINED_WITH_COMMA_AMOUNT_ROW))

    amounts = {t.payment_method: t.row["出金金額（円）"] for t in result.transactions}
    assert amounts == {"PayPayポイント": "1", "PayPay残高": "2599"}


def test_single_payment_amount_separators_are_stripped():
    """A plain row's amount is written back without separators."""
    row = '2025/03/23 13:03:03,"2,600",-,-,-,-,-,支払い,ダミーストアC,PayPay残高,-,-,00000000000000000009'
    result = extract_transactions(paypay_csv(row))

    assert result.transactions[0].row["出金金額（円）"] == "2600"
    assert result.transactions[0].key == "2025/03/23_-2600_PayPay残高_ダミーストアC"


def test_income_key_is_positive():
    """Incoming money keeps a positive amount in its key."""
    result = extract_transactions(paypay_csv(INCOME_ROW))

    transaction = result.transactions[0]
    assert transaction.key == "2025/10/20_1000_PayPay残高_ダミー太郎"
    assert transaction.row["入金金額（円）"] == "1000"
    assert transaction.row["出金金額（円）"] == "-"


def test_stats_cover_original_rows():
    """Stats count source rows, not split transactions."""
    result = extract_transactions(paypay_csv(SINGLE_PAYMENT_ROW, COMBINED_PAYMENT_ROW))

    assert len(result.transactions) == 3
    assert result.stats.count == 2
    assert result.stats.start_date == datetime(2025, 9, 29, 5, 54, 12, tzinfo=timezone.utc)
    assert result.stats.end_date == datetime(2025, 10, 24, 1, 59, 25, tzinfo=timezone.utc)


def test_order_is_stable():
    """Transactions come out in source order, siblings in encounter order."""
    result = extract_transactions(
        paypay_csv(SINGLE_PAYMENT_ROW, COMBINED_PAYMENT_ROW, VISA_PAYMENT_ROW)
    )
    assert [t.payment_method for t in result.transactions] == [
        "PayPay残高", "PayPayポイント", "PayPay残高", "VISA 1234",
    ]


def test_rows_without_method_or_amount_are_skipped():
    """Rows missing required values yield no transactions but still count."""
    no_method = "2025/10/24 10:59:25,190,-,-,-,-,-,支払い,ダミーストアA,,-,-,00000000000000000010"
    no_amount = "2025/10/24 10:59:25,-,-,-,-,-,-,支払い,ダミーストアA,PayPay残高,-,-,00000000000000000011"
    bad_date = "someday,50,-,-,-,-,-,支払い,ダミーストアE,PayPay残高,-,-,00000000000000000012"
    result = extract_transactions(paypay_csv(no_method, no_amount, bad_date))

    assert len(result.transactions) == 1
    assert result.transactions[0].key == "someday_-50_PayPay残高_ダミーストアE"
    assert result.stats.count == 3
    assert result.stats.start_date == datetime(2025, 10, 24, 1, 59, 25, tzinfo=timezone.utc)


def test_overlong_first_row_does_not_shift_later_rows():
    """A malformed first row is dropped and the next row still extracts."""
    result = extract_transactions(paypay_csv(SINGLE_PAYMENT_ROW + ",extra", VISA_PAYMENT_ROW))

    assert result.stats.count == 1
    assert [t.key for t in result.transactions] == ["2025/10/24_-72_VISA 1234_ダミーストアD"]


def test_empty_input():
    """Empty and header-only input give empty results."""
    result = extract_transactions("")
    assert result.transactions == []
    assert result.stats.count == 0
    assert result.stats.start_date is None
    assert result.headers == []

    header_only = extract_transactions(paypay_csv())
    assert header_only.transactions == []
    assert header_only.headers == []


def test_split_payment_methods():
    """Grammar: comma separated 'name (amount円)' tokens."""
    assert split_payment_methods("PayPay残高") == []
    assert split_payment_methods("") == []
    assert split_payment_methods(None) == []
    assert split_payment_methods("PayPayポイント (93円), PayPay残高 (317円)") == [
        ("PayPayポイント", "93"),
        ("PayPay残高", "317"),
    ]
    assert split_payment_methods("PayPayポイント(1円),PayPay残高 (2,599円)") == [
        ("PayPayポイント", "1"),
        ("PayPay残高", "2599"),
    ]


def test_transaction_count_law():
    """Token count, else one for a usable plain row, else zero."""
    combined = {"取引日": "2025/10/24 10:59:25", "出金金額（円）": "-", "入金金額（円）": "-",
                "取引先": "X", "取引方法": "A (1円), B (2円), C (3円)"}
    plain = {**combined, "出金金額（円）": "6", "取引方法": "A"}
    unusable = {**combined, "取引方法": "A"}

    assert len(row_to_transactions(combined)) == 3
    assert len(row_to_transactions(plain)) == 1
    assert len(row_to_transactions(unusable)) == 0


def test_source_row_is_not_mutated():
    """Split rows are copies of the source row."""
    row = {"取引日": "2025/10/24 10:59:25", "出金金額（円）": "410", "入金金額（円）": "-",
           "取引先": "X", "取引方法": "A (93円), B (317円)"}
    original = dict(row)
    row_to_transactions(row)
    assert row == original
