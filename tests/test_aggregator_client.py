import httpx
import pytest

from clinicpay.aggregator_client import list_transactions
from clinicpay.errors import AggregatorUnavailable


@pytest.fixture
def http_get(mocker):
    return mocker.patch("clinicpay.aggregator_client.httpx.get")


def test_list_transactions_request(http_get, monkeypatch):
    monkeypatch.setenv("SEPAY_BASE_URL", "https://sepay.test/userapi/")
    monkeypatch.setenv("SEPAY_TIMEOUT_SECONDS", "12")
    http_get.return_value.json.return_value = {"transactions": [{"id": 1}]}

    assert list_transactions("sk_test", "0123456789") == [{"id": 1}]

    http_get.assert_called_once_with(
        "https://sepay.test/userapi/transactions/list",
        headers={"Authorization": "Bearer sk_test", "Content-Type": "application/json"},
        params={"account_number": "0123456789", "limit": 50},
        timeout=12.0,
    )


def test_list_transactions_missing_list(http_get):
    http_get.return_value.json.return_value = {"status": 200, "transactions": None}

    assert list_transactions("sk_test", "0123456789") == []


def test_list_transactions_timeout(http_get):
    http_get.side_effect = httpx.ReadTimeout("timed out")

    with pytest.raises(AggregatorUnavailable):
        list_transactions("sk_test", "0123456789")


def test_list_transactions_http_error(http_get, mocker):
    http_get.return_value.raise_for_status.side_effect = httpx.HTTPStatusError(
        "401 Unauthorized", request=mocker.Mock(), response=mocker.Mock())

    with pytest.raises(AggregatorUnavailable):
        list_transactions("sk_test", "0123456789")


def test_list_transactions_bad_body(http_get):
    http_get.return_value.json.side_effect = ValueError("Expecting value")

    with pytest.raises(AggregatorUnavailable):
        list_transactions("sk_test", "0123456789")


def test_list_transactions_non_list_field(http_get):
    http_get.return_value.json.return_value = {"status": 200, "transactions": 5}

    with pytest.raises(AggregatorUnavailable):
        list_transactions("sk_test", "0123456789")
