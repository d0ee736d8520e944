"""Collection-vs-delivery comparison engine.

``compare`` is a pure function: it reads two immutable snapshots and
returns a fresh :class:`ComparisonResult`.  It performs no I/O, never
raises for well-formed snapshots and never clamps or "repairs" values.
Anomalies such as a negative mileage delta are surfaced unchanged because
the report is an audit document.

New damage is decided solely by the ``captured_at_stage`` tag set by the
person performing the delivery inspection.  Marker coordinates from two
independent sessions are not comparable, so no positional matching is
attempted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .domain_models import (
    DOCUMENT_ORDER,
    WHEEL_ORDER,
    ChargeLevel,
    DamageMarker,
    DocumentName,
    DocumentStatus,
    InspectionSnapshot,
    Stage,
    TyreCondition,
    WheelPosition,
    marker_to_dict,
)

__all__ = [
    "ComparisonResult",
    "DocumentStatusChange",
    "WheelChange",
    "compare",
    "new_damage_markers",
]


@dataclass(frozen=True, slots=True)
class DocumentStatusChange:
    document: DocumentName
    before: DocumentStatus
    after: DocumentStatus
    reason_if_missing: str | None = None


@dataclass(frozen=True, slots=True)
class WheelChange:
    wheel: WheelPosition
    scuffed_before: bool | None
    scuffed_after: bool | None
    tyre_before: TyreCondition | None
    tyre_after: TyreCondition | None


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    mileage_delta: int
    fuel_delta: int
    new_damage: tuple[DamageMarker, ...]
    carried_damage: tuple[DamageMarker, ...]
    damage_count_total: int
    document_status_changes: tuple[DocumentStatusChange, ...]
    key_count_delta: int = 0
    charge_before: ChargeLevel | None = None
    charge_after: ChargeLevel | None = None
    wheel_changes: tuple[WheelChange, ...] = ()

    @property
    def has_new_damage(self) -> bool:
        return bool(self.new_damage)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mileageDelta": self.mileage_delta,
            "fuelDelta": self.fuel_delta,
            "keyCountDelta": self.key_count_delta,
            "chargeBefore": str(self.charge_before) if self.charge_before else None,
            "chargeAfter": str(self.charge_after) if self.charge_after else None,
            "newDamage": [marker_to_dict(m) for m in self.new_damage],
            "carriedDamage": [marker_to_dict(m) for m in self.carried_damage],
            "damageCountTotal": self.damage_count_total,
            "documentStatusChanges": [
                {
                    "document": str(change.document),
                    "before": str(change.before),
                    "after": str(change.after),
                    "reasonIfMissing": change.reason_if_missing,
                }
                for change in self.document_status_changes
            ],
            "wheelChanges": [
                {
                    "wheel": str(change.wheel),
                    "scuffedBefore": change.scuffed_before,
                    "scuffedAfter": change.scuffed_after,
                    "tyreBefore": str(change.tyre_before) if change.tyre_before else None,
                    "tyreAfter": str(change.tyre_after) if change.tyre_after else None,
                }
                for change in self.wheel_changes
            ],
        }


def new_damage_markers(delivery: InspectionSnapshot) -> tuple[DamageMarker, ...]:
    """Delivery markers explicitly tagged as discovered at delivery."""
    return tuple(m for m in delivery.damage_markers if m.captured_at_stage == Stage.DELIVERY)


def _document_changes(
    collection: InspectionSnapshot, delivery: InspectionSnapshot
) -> tuple[DocumentStatusChange, ...]:
    changes: list[DocumentStatusChange] = []
    for name in DOCUMENT_ORDER:
        before = collection.document_status(name)
        after = delivery.document_status(name)
        if before == after:
            continue
        reason = None
        if after == DocumentStatus.NOT_PROVIDED:
            check = delivery.document(name)
            reason = check.reason_if_missing if check is not None else None
        changes.append(DocumentStatusChange(name, before, after, reason))
    return tuple(changes)


def _wheel_changes(
    collection: InspectionSnapshot, delivery: InspectionSnapshot
) -> tuple[WheelChange, ...]:
    changes: list[WheelChange] = []
    for position in WHEEL_ORDER:
        before = collection.wheel(position)
        after = delivery.wheel(position)
        scuffed_before = before.scuffed if before else None
        scuffed_after = after.scuffed if after else None
        tyre_before = before.tyre_condition if before else None
        tyre_after = after.tyre_condition if after else None
        if scuffed_before == scuffed_after and tyre_before == tyre_after:
            continue
        changes.append(
            WheelChange(position, scuffed_before, scuffed_after, tyre_before, tyre_after)
        )
    return tuple(changes)


def compare(collection: InspectionSnapshot, delivery: InspectionSnapshot) -> ComparisonResult:
    """Compute the difference between a collection and a delivery inspection."""
    new_damage = new_damage_markers(delivery)
    carried = tuple(collection.damage_markers)
    return ComparisonResult(
        mileage_delta=delivery.condition.mileage - collection.condition.mileage,
        fuel_delta=(
            delivery.condition.fuel_level_eighths - collection.condition.fuel_level_eighths
        ),
        new_damage=new_damage,
        carried_damage=carried,
        damage_count_total=len(carried) + len(new_damage),
        document_status_changes=_document_changes(collection, delivery),
        key_count_delta=delivery.key_count - collection.key_count,
        charge_before=collection.condition.charge_level,
        charge_after=delivery.condition.charge_level,
        wheel_changes=_wheel_changes(collection, delivery),
    )
