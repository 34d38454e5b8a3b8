import json
import logging
from decimal import Decimal
from uuid import uuid4

from budget_ledger.api.middleware.request_id import request_id_var
from budget_ledger.core.logging import JSONFormatter


def _record(**extra):
    record = logging.LogRecord("budget_ledger.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_json():
    entry = json.loads(JSONFormatter().format(_record()))
    assert entry["message"] == "hello world"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "budget_ledger.test"
    assert "extra" not in entry


def test_ledger_ids_are_top_level():
    adjustment_id = uuid4()
    entry = json.loads(JSONFormatter().format(_record(
        adjustment_id=adjustment_id, allocation_id="a-1", to_allocation_id=None,
        financial_year="2024-25",
    )))
    assert entry["adjustment_id"] == str(adjustment_id)
    assert entry["allocation_id"] == "a-1"
    assert entry["financial_year"] == "2024-25"
    assert "to_allocation_id" not in entry
    assert "extra" not in entry


def test_other_extras_nested_and_exact():
    entry = json.loads(JSONFormatter().format(_record(duration_ms=12, amount=Decimal("0.10"))))
    assert entry["extra"] == {"duration_ms": 12, "amount": "0.10"}


def test_masks_sensitive_extra():
    entry = json.loads(JSONFormatter().format(_record(db_password="hunter2", nested={"api_token": "x"})))
    assert entry["extra"]["db_password"] == "********"
    assert entry["extra"]["nested"]["api_token"] == "********"


def test_includes_request_id():
    token = request_id_var.set("req-1")
    try:
        entry = json.loads(JSONFormatter().format(_record()))
    finally:
        request_id_var.reset(token)
    assert entry["request_id"] == "req-1"
