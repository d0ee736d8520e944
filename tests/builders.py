"""Shared deterministic builders for inspection snapshots and report requests.

Public API
----------
- ``photo``                - a PhotoRef with a predictable id (optionally with image bytes)
- ``png_bytes``            - a small in-memory PNG
- ``marker``               - one DamageMarker
- ``all_documents``        - the four document checks, all provided
- ``wheels``               - four unscuffed wheels with OK tyres
- ``make_snapshot``        - a complete InspectionSnapshot for either stage
- ``make_job``             - JobMeta with a fixed generated_at
- ``standard_pair``        - the canonical collection/delivery scenario
- ``request_payload``      - camelCase JSON dict accepted by PodReportRequest
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from io import BytesIO
from typing import Any

from PIL import Image

from vehiclepod.domain_models import (
    DOCUMENT_ORDER,
    WHEEL_ORDER,
    Address,
    DamageMarker,
    DamageSize,
    DamageType,
    DamageView,
    DocumentCheck,
    DocumentStatus,
    EquipmentCheck,
    EquipmentItem,
    InspectionSnapshot,
    JobMeta,
    MarkerPosition,
    PhotoRef,
    Stage,
    TyreCondition,
    VehicleConditionReading,
    WeatherCondition,
    WheelTyreCheck,
)

GENERATED_AT = datetime(2026, 3, 14, 15, 30)
# Tiny valid base64 payload standing in for a signature PNG.
SIGNATURE_B64 = "data:image/png;base64,iVBORw0KGgo="


def photo(ident: str, data: bytes | None = None) -> PhotoRef:
    return PhotoRef(id=ident, url=f"https://photos.example/{ident}.jpg", data=data)


def png_bytes(
    color: tuple[int, int, int] = (200, 40, 40), size: tuple[int, int] = (32, 24)
) -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def marker(
    ident: str,
    *,
    view: DamageView = DamageView.FRONT,
    damage_type: DamageType = DamageType.SCRATCH,
    size: DamageSize = DamageSize.SMALL,
    stage: Stage = Stage.COLLECTION,
    x: float = 40.0,
    y: float = 55.0,
    description: str = "",
    photos: int = 1,
) -> DamageMarker:
    return DamageMarker(
        id=ident,
        view=view,
        position=MarkerPosition(x, y),
        damage_type=damage_type,
        size=size,
        description=description,
        photo_refs=tuple(photo(f"{ident}-{i}") for i in range(photos)),
        captured_at_stage=stage,
    )


def all_documents() -> tuple[DocumentCheck, ...]:
    return tuple(DocumentCheck(name, DocumentStatus.PROVIDED) for name in DOCUMENT_ORDER)


def wheels(**overrides: tuple[bool, TyreCondition]) -> tuple[WheelTyreCheck, ...]:
    """Four wheel checks; override one with ``frontLeft=(scuffed, tyre)``."""
    checks = []
    for position in WHEEL_ORDER:
        scuffed, tyre = overrides.get(str(position), (False, TyreCondition.OK))
        checks.append(WheelTyreCheck(position, scuffed, tyre))
    return tuple(checks)


def make_snapshot(
    stage: Stage = Stage.COLLECTION,
    *,
    mileage: int = 10_000,
    fuel: int = 6,
    key_count: int = 2,
    markers: tuple[DamageMarker, ...] = (),
    documents: tuple[DocumentCheck, ...] | None = None,
    wheel_checks: tuple[WheelTyreCheck, ...] | None = None,
    notes: str = "",
    confirmed: bool = False,
    signature: str | None = None,
    customer_name: str = "Alex Morgan",
    **extra: Any,
) -> InspectionSnapshot:
    return InspectionSnapshot(
        stage=stage,
        document_checks=all_documents() if documents is None else documents,
        key_count=key_count,
        wheel_checks=wheels() if wheel_checks is None else wheel_checks,
        damage_markers=markers,
        condition=VehicleConditionReading(fuel_level_eighths=fuel, mileage=mileage),
        customer_name=customer_name,
        customer_signature=signature,
        notes=notes,
        confirmed_by_customer=confirmed,
        **extra,
    )


def make_job(**overrides: Any) -> JobMeta:
    job = JobMeta(
        job_number="JOB-1042",
        registration="sk21 abc",
        generated_at=GENERATED_AT,
        make="Volkswagen",
        model="Golf",
        colour="Blue",
        fuel_type="Petrol",
        collection_address=Address("1 Market Street", "", "Edinburgh", "EH1 1AA"),
        delivery_address=Address("22 Union Street", "Flat 3", "Aberdeen", "AB11 6BA"),
        customer_name="Alex Morgan",
        driver_name="Sam Reid",
        driver_signature=SIGNATURE_B64,
    )
    return replace(job, **overrides)


def standard_pair() -> tuple[InspectionSnapshot, InspectionSnapshot]:
    """Scratch recorded at collection; a dent found at delivery; 150 miles; fuel 6 to 4."""
    collection = make_snapshot(
        Stage.COLLECTION,
        mileage=10_000,
        fuel=6,
        markers=(marker("m1", damage_type=DamageType.SCRATCH),),
        equipment_checks=(
            EquipmentCheck(EquipmentItem.SPARE_WHEEL, True),
            EquipmentCheck(EquipmentItem.HANDBOOK, True),
        ),
        weather=WeatherCondition.DRY,
    )
    delivery = make_snapshot(
        Stage.DELIVERY,
        mileage=10_150,
        fuel=4,
        markers=(
            marker(
                "m2",
                view=DamageView.REAR,
                damage_type=DamageType.DENT,
                size=DamageSize.MEDIUM,
                stage=Stage.DELIVERY,
                description="Dent above rear bumper",
            ),
        ),
        confirmed=True,
        signature=SIGNATURE_B64,
        equipment_checks=(
            EquipmentCheck(EquipmentItem.SPARE_WHEEL, True),
            EquipmentCheck(EquipmentItem.HANDBOOK, False),
        ),
        weather=WeatherCondition.WET,
    )
    return collection, delivery


# ---------------------------------------------------------------------------
# JSON payloads
# ---------------------------------------------------------------------------


def snapshot_payload(stage: str = "collection", **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "stage": stage,
        "documentChecks": [
            {"documentName": str(name), "status": "provided"} for name in DOCUMENT_ORDER
        ],
        "keyCount": 2,
        "wheelChecks": [
            {"wheelPosition": str(position), "scuffed": False, "tyreCondition": "ok"}
            for position in WHEEL_ORDER
        ],
        "damageMarkers": [],
        "condition": {"fuelLevelEighths": 6, "mileage": 10000},
        "customerName": "Alex Morgan",
        "notes": "",
        "confirmedByCustomer": stage == "delivery",
    }
    payload.update(overrides)
    return payload


def request_payload(**job_overrides: Any) -> dict[str, Any]:
    job: dict[str, Any] = {
        "jobNumber": "JOB-1042",
        "registration": "SK21 ABC",
        "generatedAt": "2026-03-14T15:30:00",
        "make": "Volkswagen",
        "model": "Golf",
        "customerName": "Alex Morgan",
        "driverName": "Sam Reid",
    }
    job.update(job_overrides)
    return {
        "collection": snapshot_payload(
            "collection",
            damageMarkers=[
                {
                    "id": "m1",
                    "view": "front",
                    "position": {"x": 40, "y": 55},
                    "damageType": "scratch",
                    "size": "small",
                    "capturedAtStage": "collection",
                }
            ],
        ),
        "delivery": snapshot_payload(
            "delivery",
            condition={"fuelLevelEighths": 4, "mileage": 10150},
            damageMarkers=[
                {
                    "id": "m2",
                    "view": "rear",
                    "position": {"x": 60, "y": 30},
                    "damageType": "dent",
                    "size": "medium",
                    "capturedAtStage": "delivery",
                }
            ],
            customerSignature=SIGNATURE_B64,
        ),
        "job": job,
    }
