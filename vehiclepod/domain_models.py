"""Domain model objects for inspection snapshots and job metadata.

Snapshots are captured once by the driver app and handed to the report
engine as immutable value objects.  Nothing in this package mutates them;
all types are frozen dataclasses so concurrent report builds can share
inputs safely.

Enum values are the camelCase strings used on the wire by the capture UI.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Stage(enum.StrEnum):
    COLLECTION = "collection"
    DELIVERY = "delivery"


class DamageView(enum.StrEnum):
    FRONT = "front"
    REAR = "rear"
    DRIVER_SIDE = "driverSide"
    PASSENGER_SIDE = "passengerSide"
    ROOF = "roof"


class DamageType(enum.StrEnum):
    SCRATCH = "scratch"
    DENT = "dent"
    PAINT_CHIP = "paintChip"
    RUST = "rust"
    CRACK = "crack"
    MISSING_PART = "missingPart"
    BROKEN_GLASS = "brokenGlass"
    SCUFF_MARK = "scuffMark"
    STONE_CHIP = "stoneChip"
    PANEL_GAP = "panelGap"
    OTHER = "other"


class DamageSize(enum.StrEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class DocumentName(enum.StrEnum):
    V5 = "v5"
    MOT = "mot"
    SERVICE_BOOK = "serviceBook"
    INSURANCE = "insurance"


class DocumentStatus(enum.StrEnum):
    PROVIDED = "provided"
    NOT_PROVIDED = "notProvided"


class WheelPosition(enum.StrEnum):
    FRONT_LEFT = "frontLeft"
    FRONT_RIGHT = "frontRight"
    REAR_LEFT = "rearLeft"
    REAR_RIGHT = "rearRight"


class TyreCondition(enum.StrEnum):
    OK = "ok"
    WORN = "worn"
    EXTREMELY_WORN = "extremelyWorn"


class ChargeLevel(enum.StrEnum):
    NA = "na"
    EMPTY = "empty"
    QUARTER = "quarter"
    HALF = "half"
    THREE_QUARTER = "threeQuarter"
    FULL = "full"


class WeatherCondition(enum.StrEnum):
    WET = "wet"
    DRY = "dry"
    LIGHT = "light"
    GOOD = "good"
    BAD = "bad"


class EquipmentItem(enum.StrEnum):
    SPARE_WHEEL = "spareWheel"
    JACK = "jack"
    TOOLS = "tools"
    LOCKING_WHEEL_NUT = "lockingWheelNut"
    CHARGING_CABLES = "chargingCables"
    SAT_NAV_WORKING = "satNavWorking"
    DELIVERY_PACK = "deliveryPack"
    NUMBER_PLATES_MATCH = "numberPlatesMatch"
    HEADRESTS = "headrests"
    PARCEL_SHELF = "parcelShelf"
    MATS_IN_PLACE = "matsInPlace"
    HANDBOOK = "handbook"
    NO_WARNING_LIGHTS = "noWarningLights"


# Canonical orderings used wherever the report lists these kinds.
DOCUMENT_ORDER: tuple[DocumentName, ...] = tuple(DocumentName)
WHEEL_ORDER: tuple[WheelPosition, ...] = tuple(WheelPosition)
FUEL_EIGHTHS_MAX = 8
KEY_COUNT_MAX = 4
"""``keyCount == 4`` means "4 or more"."""


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PhotoRef:
    """Reference to an already-stored photo.

    The engine never fetches *url*.  When the caller has resolved the image
    it passes the bytes in *data* and the report embeds them; otherwise the
    report shows a placeholder.
    """

    id: str
    url: str | None = None
    captured_at: str | None = None
    data: bytes | None = field(default=None, repr=False)

    @property
    def has_image(self) -> bool:
        return bool(self.data)


@dataclass(frozen=True, slots=True)
class MarkerPosition:
    """Marker location as a percentage (0-100) of the outline image box."""

    x: float
    y: float


@dataclass(frozen=True, slots=True)
class DamageMarker:
    id: str
    view: DamageView
    position: MarkerPosition
    damage_type: DamageType
    size: DamageSize
    description: str = ""
    photo_refs: tuple[PhotoRef, ...] = ()
    captured_at_stage: Stage = Stage.COLLECTION


@dataclass(frozen=True, slots=True)
class DocumentCheck:
    document_name: DocumentName
    status: DocumentStatus
    photo_refs: tuple[PhotoRef, ...] = ()
    reason_if_missing: str | None = None


@dataclass(frozen=True, slots=True)
class WheelTyreCheck:
    wheel_position: WheelPosition
    scuffed: bool
    tyre_condition: TyreCondition
    photo_refs: tuple[PhotoRef, ...] = ()


@dataclass(frozen=True, slots=True)
class EquipmentCheck:
    item: EquipmentItem
    present: bool


@dataclass(frozen=True, slots=True)
class VehicleConditionReading:
    fuel_level_eighths: int
    mileage: int
    charge_level: ChargeLevel | None = None
    odometer_photo_refs: tuple[PhotoRef, ...] = ()
    fuel_gauge_photo_refs: tuple[PhotoRef, ...] = ()


@dataclass(frozen=True, slots=True)
class InspectionSnapshot:
    stage: Stage
    document_checks: tuple[DocumentCheck, ...]
    key_count: int
    wheel_checks: tuple[WheelTyreCheck, ...]
    damage_markers: tuple[DamageMarker, ...]
    condition: VehicleConditionReading
    customer_name: str
    customer_signature: str | None = None
    notes: str = ""
    confirmed_by_customer: bool = False
    equipment_checks: tuple[EquipmentCheck, ...] = ()
    weather: WeatherCondition | None = None

    # -- lookups ---------------------------------------------------------------

    def document(self, name: DocumentName) -> DocumentCheck | None:
        for check in self.document_checks:
            if check.document_name == name:
                return check
        return None

    def document_status(self, name: DocumentName) -> DocumentStatus:
        """Status for *name*; a document kind that was never checked counts as not provided."""
        check = self.document(name)
        return check.status if check is not None else DocumentStatus.NOT_PROVIDED

    def wheel(self, position: WheelPosition) -> WheelTyreCheck | None:
        for check in self.wheel_checks:
            if check.wheel_position == position:
                return check
        return None

    def equipment(self) -> Mapping[EquipmentItem, bool]:
        return {check.item: check.present for check in self.equipment_checks}

    @property
    def has_signature(self) -> bool:
        return bool(self.customer_signature and self.customer_signature.strip())


@dataclass(frozen=True, slots=True)
class Address:
    line1: str = ""
    line2: str = ""
    city: str = ""
    postcode: str = ""

    def one_line(self) -> str:
        parts = (self.line1, self.line2, self.city, self.postcode)
        return ", ".join(p.strip() for p in parts if p.strip())


@dataclass(frozen=True, slots=True)
class JobMeta:
    """Job, vehicle and party details supplied by the persistence layer."""

    job_number: str
    registration: str
    generated_at: datetime | None
    make: str = ""
    model: str = ""
    colour: str = ""
    fuel_type: str = ""
    collection_address: Address = field(default_factory=Address)
    delivery_address: Address = field(default_factory=Address)
    customer_name: str = ""
    driver_name: str = ""
    driver_signature: str | None = None

    @property
    def make_model(self) -> str:
        return " ".join(p for p in (self.make.strip(), self.model.strip()) if p)

    @property
    def has_driver_signature(self) -> bool:
        return bool(self.driver_signature and self.driver_signature.strip())

    def missing_required_fields(self) -> list[str]:
        missing: list[str] = []
        if not self.job_number.strip():
            missing.append("job_number")
        if not self.registration.strip():
            missing.append("registration")
        if self.generated_at is None:
            missing.append("generated_at")
        return missing


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------


def _photos_to_list(photos: tuple[PhotoRef, ...]) -> list[dict[str, Any]]:
    return [
        {"id": p.id, "url": p.url, "capturedAt": p.captured_at, "hasImage": p.has_image}
        for p in photos
    ]


def marker_to_dict(marker: DamageMarker) -> dict[str, Any]:
    """JSON-ready camelCase dict for *marker* (used by the comparison endpoints)."""
    return {
        "id": marker.id,
        "view": str(marker.view),
        "position": {"x": marker.position.x, "y": marker.position.y},
        "damageType": str(marker.damage_type),
        "size": str(marker.size),
        "description": marker.description,
        "photoRefs": _photos_to_list(marker.photo_refs),
        "capturedAtStage": str(marker.captured_at_stage),
    }
