"""Pydantic request/response models for the proof-of-delivery HTTP API and CLI.

Field names follow the camelCase JSON produced by the capture app.  Every
model converts itself to the frozen domain objects via ``to_domain()``;
the structural invariants of an inspection (value ranges, exactly one
check per wheel, reasons for missing documents) are enforced here so the
report engine only ever sees valid snapshots.
"""

from __future__ import annotations

import base64
import binascii
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .domain_models import (
    FUEL_EIGHTHS_MAX,
    KEY_COUNT_MAX,
    WHEEL_ORDER,
    Address,
    ChargeLevel,
    DamageMarker,
    DamageSize,
    DamageType,
    DamageView,
    DocumentCheck,
    DocumentName,
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
    WheelPosition,
    WheelTyreCheck,
)


def _decode_image(text: str, what: str) -> bytes:
    """Decode raw base64 or a ``data:image/...;base64,`` URL."""
    payload = text.split(",", 1)[1] if text.startswith("data:") and "," in text else text
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"{what} must be base64-encoded image data") from exc


def _validate_signature(value: str | None) -> str | None:
    """Blank means unsigned; anything else must decode as base64."""
    if value is None or not value.strip():
        return None
    text = value.strip()
    _decode_image(text, "signature")
    return text


def _photos(refs: list[PhotoRefModel]) -> tuple[PhotoRef, ...]:
    return tuple(ref.to_domain() for ref in refs)


# ---------------------------------------------------------------------------
# Inspection snapshot models
# ---------------------------------------------------------------------------


class PhotoRefModel(BaseModel):
    id: str = Field(min_length=1)
    url: str | None = None
    capturedAt: str | None = None
    data: str | None = None

    @field_validator("data")
    @classmethod
    def _data(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        text = value.strip()
        _decode_image(text, "photo data")
        return text

    def to_domain(self) -> PhotoRef:
        return PhotoRef(
            id=self.id,
            url=self.url,
            captured_at=self.capturedAt,
            data=_decode_image(self.data, "photo data") if self.data else None,
        )


class MarkerPositionModel(BaseModel):
    x: float = Field(ge=0, le=100)
    y: float = Field(ge=0, le=100)


class DamageMarkerModel(BaseModel):
    id: str = Field(min_length=1)
    view: DamageView
    position: MarkerPositionModel
    damageType: DamageType
    size: DamageSize
    description: str = ""
    photoRefs: list[PhotoRefModel] = Field(default_factory=list)
    capturedAtStage: Stage

    def to_domain(self) -> DamageMarker:
        return DamageMarker(
            id=self.id,
            view=self.view,
            position=MarkerPosition(self.position.x, self.position.y),
            damage_type=self.damageType,
            size=self.size,
            description=self.description,
            photo_refs=_photos(self.photoRefs),
            captured_at_stage=self.capturedAtStage,
        )


class DocumentCheckModel(BaseModel):
    documentName: DocumentName
    status: DocumentStatus
    photoRefs: list[PhotoRefModel] = Field(default_factory=list)
    reasonIfMissing: str | None = None

    @model_validator(mode="after")
    def _reason_iff_missing(self) -> DocumentCheckModel:
        has_reason = bool(self.reasonIfMissing and self.reasonIfMissing.strip())
        if self.status == DocumentStatus.NOT_PROVIDED and not has_reason:
            raise ValueError(f"{self.documentName}: reasonIfMissing is required when not provided")
        if self.status == DocumentStatus.PROVIDED and has_reason:
            raise ValueError(f"{self.documentName}: reasonIfMissing is only allowed when missing")
        return self

    def to_domain(self) -> DocumentCheck:
        return DocumentCheck(
            document_name=self.documentName,
            status=self.status,
            photo_refs=_photos(self.photoRefs),
            reason_if_missing=self.reasonIfMissing.strip() if self.reasonIfMissing else None,
        )


class WheelTyreCheckModel(BaseModel):
    wheelPosition: WheelPosition
    scuffed: bool
    tyreCondition: TyreCondition
    photoRefs: list[PhotoRefModel] = Field(default_factory=list)

    def to_domain(self) -> WheelTyreCheck:
        return WheelTyreCheck(
            wheel_position=self.wheelPosition,
            scuffed=self.scuffed,
            tyre_condition=self.tyreCondition,
            photo_refs=_photos(self.photoRefs),
        )


class EquipmentCheckModel(BaseModel):
    item: EquipmentItem
    present: bool

    def to_domain(self) -> EquipmentCheck:
        return EquipmentCheck(item=self.item, present=self.present)


class VehicleConditionModel(BaseModel):
    fuelLevelEighths: int = Field(ge=0, le=FUEL_EIGHTHS_MAX)
    mileage: int = Field(ge=0)
    chargeLevel: ChargeLevel | None = None
    odometerPhotoRefs: list[PhotoRefModel] = Field(default_factory=list)
    fuelGaugePhotoRefs: list[PhotoRefModel] = Field(default_factory=list)

    def to_domain(self) -> VehicleConditionReading:
        return VehicleConditionReading(
            fuel_level_eighths=self.fuelLevelEighths,
            mileage=self.mileage,
            charge_level=self.chargeLevel,
            odometer_photo_refs=_photos(self.odometerPhotoRefs),
            fuel_gauge_photo_refs=_photos(self.fuelGaugePhotoRefs),
        )


class InspectionSnapshotModel(BaseModel):
    stage: Stage
    documentChecks: list[DocumentCheckModel] = Field(default_factory=list)
    keyCount: int = Field(ge=1, le=KEY_COUNT_MAX)
    wheelChecks: list[WheelTyreCheckModel]
    damageMarkers: list[DamageMarkerModel] = Field(default_factory=list)
    condition: VehicleConditionModel
    customerName: str = ""
    customerSignature: str | None = None
    notes: str = ""
    confirmedByCustomer: bool = False
    equipmentChecks: list[EquipmentCheckModel] = Field(default_factory=list)
    weather: WeatherCondition | None = None

    @field_validator("customerSignature")
    @classmethod
    def _signature(cls, value: str | None) -> str | None:
        return _validate_signature(value)

    @field_validator("wheelChecks")
    @classmethod
    def _one_check_per_wheel(cls, value: list[WheelTyreCheckModel]) -> list[WheelTyreCheckModel]:
        positions = [check.wheelPosition for check in value]
        if len(positions) != len(WHEEL_ORDER) or set(positions) != set(WHEEL_ORDER):
            raise ValueError("wheelChecks must contain exactly one entry for each of the 4 wheels")
        return value

    @field_validator("documentChecks")
    @classmethod
    def _unique_documents(cls, value: list[DocumentCheckModel]) -> list[DocumentCheckModel]:
        names = [check.documentName for check in value]
        if len(names) != len(set(names)):
            raise ValueError("documentChecks must not repeat a document")
        return value

    @field_validator("damageMarkers")
    @classmethod
    def _unique_marker_ids(cls, value: list[DamageMarkerModel]) -> list[DamageMarkerModel]:
        ids = [marker.id for marker in value]
        if len(ids) != len(set(ids)):
            raise ValueError("damageMarkers ids must be unique within a snapshot")
        return value

    @field_validator("equipmentChecks")
    @classmethod
    def _unique_equipment(cls, value: list[EquipmentCheckModel]) -> list[EquipmentCheckModel]:
        items = [check.item for check in value]
        if len(items) != len(set(items)):
            raise ValueError("equipmentChecks must not repeat an item")
        return value

    def to_domain(self) -> InspectionSnapshot:
        wheels = {check.wheelPosition: check.to_domain() for check in self.wheelChecks}
        return InspectionSnapshot(
            stage=self.stage,
            document_checks=tuple(check.to_domain() for check in self.documentChecks),
            key_count=self.keyCount,
            wheel_checks=tuple(wheels[position] for position in WHEEL_ORDER),
            damage_markers=tuple(marker.to_domain() for marker in self.damageMarkers),
            condition=self.condition.to_domain(),
            customer_name=self.customerName,
            customer_signature=self.customerSignature,
            notes=self.notes,
            confirmed_by_customer=self.confirmedByCustomer,
            equipment_checks=tuple(check.to_domain() for check in self.equipmentChecks),
            weather=self.weather,
        )


# ---------------------------------------------------------------------------
# Job metadata and request envelope
# ---------------------------------------------------------------------------


class AddressModel(BaseModel):
    line1: str = ""
    line2: str = ""
    city: str = ""
    postcode: str = ""

    def to_domain(self) -> Address:
        return Address(self.line1, self.line2, self.city, self.postcode)


class JobMetaModel(BaseModel):
    jobNumber: str = Field(min_length=1)
    registration: str = Field(min_length=1)
    generatedAt: datetime
    make: str = ""
    model: str = ""
    colour: str = ""
    fuelType: str = ""
    collectionAddress: AddressModel = Field(default_factory=AddressModel)
    deliveryAddress: AddressModel = Field(default_factory=AddressModel)
    customerName: str = ""
    driverName: str = ""
    driverSignature: str | None = None

    @field_validator("driverSignature")
    @classmethod
    def _signature(cls, value: str | None) -> str | None:
        return _validate_signature(value)

    def to_domain(self) -> JobMeta:
        return JobMeta(
            job_number=self.jobNumber.strip(),
            registration=self.registration.strip(),
            generated_at=self.generatedAt,
            make=self.make,
            model=self.model,
            colour=self.colour,
            fuel_type=self.fuelType,
            collection_address=self.collectionAddress.to_domain(),
            delivery_address=self.deliveryAddress.to_domain(),
            customer_name=self.customerName,
            driver_name=self.driverName,
            driver_signature=self.driverSignature,
        )


class ComparisonRequest(BaseModel):
    collection: InspectionSnapshotModel
    delivery: InspectionSnapshotModel


class PodReportRequest(ComparisonRequest):
    job: JobMetaModel


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class ComparisonResponse(BaseModel):
    mileageDelta: int
    fuelDelta: int
    keyCountDelta: int
    chargeBefore: str | None = None
    chargeAfter: str | None = None
    newDamage: list[dict[str, Any]]
    carriedDamage: list[dict[str, Any]]
    damageCountTotal: int
    documentStatusChanges: list[dict[str, Any]]
    wheelChanges: list[dict[str, Any]]
