"""Tests for the camelCase wire format of API schemas."""

from datetime import datetime

import pytest

from api.schemas import (
    BankEntryResponse,
    ComplianceBalanceResponse,
    ComplianceRecordResponse,
    PoolCreateRequest,
)
from api.schemas.common import to_camel


@pytest.mark.parametrize("name,expected", [
    ("ship_id", "shipId"),
    ("cb_before", "cbBefore"),
    ("cb_gco2eq", "cbGco2eq"),
    ("amount_gco2eq", "amountGco2eq"),
    ("year", "year"),
])
def test_to_camel(name, expected):
    assert to_camel(name) == expected


def test_balance_keys_keep_lowercase_after_digit():
    data = ComplianceBalanceResponse(
        ship_id="SHIP002", year=2024, cb_gco2eq=263.08224, adjusted_cb=263.08224,
        banked_amount=0.0,
    ).model_dump(by_alias=True)
    assert set(data) == {"shipId", "year", "cbGco2eq", "adjustedCb", "bankedAmount"}


def test_record_and_entry_keys():
    now = datetime(2025, 1, 1)
    record = ComplianceRecordResponse(
        id=1, ship_id="S", route_id="R001", year=2024, cb_gco2eq=1.0, created_at=now,
    ).model_dump(by_alias=True)
    entry = BankEntryResponse(
        id=1, ship_id="S", year=2024, amount_gco2eq=-1.0, created_at=now,
    ).model_dump(by_alias=True)
    assert "cbGco2eq" in record
    assert "amountGco2eq" in entry


def test_request_accepts_camel_and_snake():
    camel = PoolCreateRequest.model_validate(
        {"year": 2025, "members": [{"shipId": "A", "cbBefore": 1}]}
    )
    snake = PoolCreateRequest.model_validate(
        {"year": 2025, "members": [{"ship_id": "A", "cb_before": 1}]}
    )
    assert camel == snake
