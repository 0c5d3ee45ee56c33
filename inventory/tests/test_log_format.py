import json
import logging

from config.logging import JsonFormatter, SamplingFilter


def _record(msg, level=logging.INFO, **extra):
    record = logging.LogRecord("stockledger.inventory", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_merges_extras():
    record = _record("inventory.movement_verified", event="inventory.movement_verified", movement_id=12, kind="in")

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["name"] == "stockledger.inventory"
    assert payload["message"] == "inventory.movement_verified"
    assert payload["event"] == "inventory.movement_verified"
    assert payload["movement_id"] == 12
    assert payload["time"].endswith("Z")
    assert "lineno" not in payload


def test_json_formatter_stringifies_unserializable_values():
    payload = json.loads(JsonFormatter().format(_record("x", user=object())))
    assert isinstance(payload["user"], str)


def test_sampling_never_drops_audit_events():
    flt = SamplingFilter(rate=0.0, allow_events=["inventory.movement_verified", "inventory.movement_deleted"])

    assert flt.filter(_record("inventory.movement_verified", event="inventory.movement_verified"))
    assert flt.filter(_record("inventory.movement_deleted", event="inventory.movement_deleted"))
    assert not flt.filter(_record("inventory.movement_created", event="inventory.movement_created"))


def test_sampling_only_applies_to_configured_levels():
    flt = SamplingFilter(rate=0.0, levels=["INFO"])

    assert flt.filter(_record("inventory.verification_store_failure", level=logging.ERROR))
    assert not flt.filter(_record("inventory.snapshot_published"))


def test_sampling_rate_one_keeps_everything():
    flt = SamplingFilter(rate="not-a-number")
    assert flt.rate == 1.0
    assert flt.filter(_record("inventory.movement_updated"))


# EOF
