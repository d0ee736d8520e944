from __future__ import annotations

from dataclasses import replace

from builders import make_snapshot, marker, standard_pair, wheels

from vehiclepod.comparison import compare, new_damage_markers
from vehiclepod.domain_models import (
    DOCUMENT_ORDER,
    ChargeLevel,
    DocumentCheck,
    DocumentName,
    DocumentStatus,
    Stage,
    TyreCondition,
    VehicleConditionReading,
    WheelPosition,
)


def test_standard_scenario_deltas_and_damage_split() -> None:
    collection, delivery = standard_pair()
    result = compare(collection, delivery)

    assert result.mileage_delta == 150
    assert result.fuel_delta == -2
    assert [m.id for m in result.new_damage] == ["m2"]
    assert [m.id for m in result.carried_damage] == ["m1"]
    assert result.damage_count_total == 2
    assert result.document_status_changes == ()
    assert result.has_new_damage


def test_negative_mileage_delta_is_reported_unchanged() -> None:
    collection = make_snapshot(Stage.COLLECTION, mileage=10_000)
    delivery = make_snapshot(Stage.DELIVERY, mileage=9_980)
    assert compare(collection, delivery).mileage_delta == -20


def test_delivery_markers_tagged_collection_are_not_new_damage() -> None:
    collection = make_snapshot(Stage.COLLECTION, markers=(marker("m1"),))
    delivery = make_snapshot(
        Stage.DELIVERY,
        markers=(marker("m1-confirmed"), marker("m9", stage=Stage.DELIVERY)),
    )
    result = compare(collection, delivery)
    assert [m.id for m in result.new_damage] == ["m9"]
    assert [m.id for m in new_damage_markers(delivery)] == ["m9"]
    assert result.damage_count_total == 2


def test_no_damage_anywhere() -> None:
    result = compare(make_snapshot(Stage.COLLECTION), make_snapshot(Stage.DELIVERY))
    assert result.new_damage == ()
    assert result.carried_damage == ()
    assert result.damage_count_total == 0
    assert not result.has_new_damage


def test_document_going_missing_carries_reason() -> None:
    delivery_docs = tuple(
        DocumentCheck(name, DocumentStatus.PROVIDED)
        if name != DocumentName.MOT
        else DocumentCheck(name, DocumentStatus.NOT_PROVIDED, reason_if_missing="Left at depot")
        for name in DOCUMENT_ORDER
    )
    result = compare(
        make_snapshot(Stage.COLLECTION), make_snapshot(Stage.DELIVERY, documents=delivery_docs)
    )
    assert len(result.document_status_changes) == 1
    change = result.document_status_changes[0]
    assert change.document == DocumentName.MOT
    assert change.before == DocumentStatus.PROVIDED
    assert change.after == DocumentStatus.NOT_PROVIDED
    assert change.reason_if_missing == "Left at depot"


def test_absent_document_counts_as_not_provided() -> None:
    collection = make_snapshot(Stage.COLLECTION, documents=())
    delivery = make_snapshot(Stage.DELIVERY)
    changes = compare(collection, delivery).document_status_changes
    assert [c.document for c in changes] == list(DOCUMENT_ORDER)
    assert all(c.before == DocumentStatus.NOT_PROVIDED for c in changes)
    assert all(c.reason_if_missing is None for c in changes)


def test_wheel_and_key_changes() -> None:
    collection = make_snapshot(Stage.COLLECTION, key_count=3)
    delivery = make_snapshot(
        Stage.DELIVERY,
        key_count=2,
        wheel_checks=wheels(rearRight=(True, TyreCondition.WORN)),
    )
    result = compare(collection, delivery)
    assert result.key_count_delta == -1
    assert len(result.wheel_changes) == 1
    change = result.wheel_changes[0]
    assert change.wheel == WheelPosition.REAR_RIGHT
    assert change.scuffed_before is False
    assert change.scuffed_after is True
    assert change.tyre_after == TyreCondition.WORN


def test_charge_levels_pass_through() -> None:
    collection = make_snapshot(Stage.COLLECTION)
    delivery = make_snapshot(Stage.DELIVERY)
    collection = replace(
        collection, condition=VehicleConditionReading(6, 10_000, charge_level=ChargeLevel.FULL)
    )
    result = compare(collection, delivery)
    assert result.charge_before == ChargeLevel.FULL
    assert result.charge_after is None


def test_compare_does_not_mutate_and_is_repeatable() -> None:
    collection, delivery = standard_pair()
    first = compare(collection, delivery)
    second = compare(collection, delivery)
    assert first == second
    assert collection == standard_pair()[0]


def test_to_dict_uses_camel_case() -> None:
    payload = compare(*standard_pair()).to_dict()
    assert payload["mileageDelta"] == 150
    assert payload["fuelDelta"] == -2
    assert payload["damageCountTotal"] == 2
    assert payload["newDamage"][0]["capturedAtStage"] == "delivery"
    assert payload["newDamage"][0]["damageType"] == "dent"
    assert payload["carriedDamage"][0]["id"] == "m1"
