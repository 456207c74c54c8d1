"""Schema conformance tests for outbound payloads.

Encoded payloads must validate against the JSON Schemas shipped with the
package, and the schemas must reject payloads the collector cannot use.
"""

# pylint: disable=redefined-outer-name
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from jsonschema import ValidationError as JsonSchemaValidationError
from jsonschema import validate as jsonschema_validate
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

import deal_sync
from deal_sync.core.domain.types import (
    PositionCloseEvent,
    PositionOpenEvent,
    PositionUpdateEvent,
)
from deal_sync.core.encoding.encoder import MessageEncoder

SCHEMA_DIR = Path(deal_sync.__file__).parent / "core" / "schemas"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def load_schema(name: str) -> dict[str, Any]:
    with (SCHEMA_DIR / name).open("r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture(scope="module")
def registry() -> Registry:
    reg: Registry = Registry()
    for name in ("common.schema.json", "position_deal.schema.json", "position_update.schema.json"):
        schema = load_schema(name)
        resource = Resource.from_contents(schema, default_specification=DRAFT202012)
        reg = reg.with_resource(schema["$id"], resource)
    return reg


def encode(event: Any) -> dict[str, Any]:
    encoder = MessageEncoder(account_id="acct", access_token="tok")
    return json.loads(encoder.encode(event))


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

def test_open_and_close_payloads_match_schema(registry) -> None:
    schema = load_schema("position_deal.schema.json")
    common = {
        "position_id": 10,
        "symbol": "EURUSD",
        "direction": 1,
        "volume": 0.3,
        "price": 1.1,
        "profit": 4.2,
        "deal_ticket": 11,
    }

    jsonschema_validate(instance=encode(PositionOpenEvent(opened_at=5, **common)), schema=schema, registry=registry)
    jsonschema_validate(instance=encode(PositionCloseEvent(closed_at=6, **common)), schema=schema, registry=registry)


def test_update_payload_matches_schema(registry) -> None:
    schema = load_schema("position_update.schema.json")
    event = PositionUpdateEvent(
        position_id=10,
        symbol="EURUSD",
        direction=0,
        volume=0.3,
        price=1.1,
        current_price=1.2,
        sl=1.0,
        tp=1.3,
        profit=30.0,
        opened_at=5,
        updated_at=6,
    )

    jsonschema_validate(instance=encode(event), schema=schema, registry=registry)


def test_schema_rejects_open_payload_with_closed_at(registry) -> None:
    schema = load_schema("position_deal.schema.json")
    instance = encode(
        PositionOpenEvent(
            position_id=10,
            symbol="EURUSD",
            direction=0,
            volume=0.3,
            price=1.1,
            profit=0.0,
            deal_ticket=11,
            opened_at=5,
        )
    )
    instance["closed_at"] = 6

    with pytest.raises(JsonSchemaValidationError):
        jsonschema_validate(instance=instance, schema=schema, registry=registry)


def test_schema_rejects_unknown_keys(registry) -> None:
    schema = load_schema("position_update.schema.json")
    instance = encode(
        PositionUpdateEvent(
            position_id=10,
            symbol="EURUSD",
            direction=0,
            volume=0.3,
            price=1.1,
            current_price=1.2,
            sl=1.0,
            tp=1.3,
            profit=30.0,
            opened_at=5,
            updated_at=6,
        )
    )
    instance["comment"] = "extra"

    with pytest.raises(JsonSchemaValidationError):
        jsonschema_validate(instance=instance, schema=schema, registry=registry)
