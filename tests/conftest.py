"""
Shared sample exports for tests.
"""
import pytest

from core.config import reset_settings

PAYPAY_HEADER = "取引日,出金金額（円）,入金金額（円）,海外出金金額,通貨,変換レート（円）,利用国,取引内容,取引先,取引方法,支払い区分,利用者,取引番号"
MFME_HEADER = "計算対象,日付,内容,金額（円）,保有金融機関,大項目,中項目,メモ,振替,ID"

SINGLE_PAYMENT_ROW = "2025/10/24 10:59:25,190,-,-,-,-,-,支払い,ダミーストアA,PayPay残高,-,-,00000000000000000001"
COMBINED_PAYMENT_ROW = '2025/09/29 14:54:12,410,-,-,-,-,-,支払い,ダミーストアB,"PayPayポイント (93円), PayPay残高 (317円)",-,-,00000000000000000002'
COMBINED_WITH_COMMA_AMOUNT_ROW = '2025/03/23 13:03:03,"2,600",-,-,-,-,-,支払い,ダミーストアC,"PayPayポイント (1円), PayPay残高 (2,599円)",-,-,00000000000000000003'
VISA_PAYMENT_ROW = "2025/10/24 13:17:35,72,-,-,-,-,-,支払い,ダミーストアD,VISA 1234,-,-,00000000000000000004"
INCOME_ROW = "2025/10/20 09:00:00,-,1000,-,-,-,-,受け取った金額,ダミー太郎,PayPay残高,-,-,00000000000000000005"


def paypay_csv(*rows: str) -> str:
    """Join data rows under the PayPay header."""
    return "\n".join((PAYPAY_HEADER,) + rows) + "\n"


def mfme_csv(*rows: str) -> str:
    """Join data rows under the MoneyForward ME header."""
    return "\n".join((MFME_HEADER,) + rows) + "\n"


@pytest.fixture(autouse=True)
def fresh_settings():
    """Rebuild settings for every test so environment changes never leak."""
    reset_settings()
    yield
    reset_settings()
