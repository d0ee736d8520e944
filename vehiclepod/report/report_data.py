"""Report template data: everything the PDF renderer needs, pre-formatted.

``map_report`` turns the domain inputs plus a :class:`ComparisonResult`
into plain display strings and flags.  Section renderers never look at
domain objects; they only draw what is in these dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..comparison import ComparisonResult, WheelChange
from ..config import ReportConfig
from ..domain_models import (
    DOCUMENT_ORDER,
    FUEL_EIGHTHS_MAX,
    KEY_COUNT_MAX,
    WHEEL_ORDER,
    ChargeLevel,
    DamageMarker,
    DocumentStatus,
    EquipmentItem,
    InspectionSnapshot,
    JobMeta,
    PhotoRef,
    TyreCondition,
    WeatherCondition,
)
from ..report_i18n import tr

DAMAGE_ROWS_PER_BLOCK = 10
NOTES_MAX_LINES = 4
SUMMARY_MAX_LINES = 2
PHOTOS_PER_BLOCK = 4

# ---------------------------------------------------------------------------
# Template dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HeaderData:
    company_name: str
    company_contact: str
    title: str
    job_label: str
    registration_label: str
    generated_label: str


@dataclass(frozen=True)
class FooterData:
    line: str


@dataclass(frozen=True)
class KeyValueRow:
    label: str
    value: str
    max_lines: int | None = None


@dataclass(frozen=True)
class SummaryData:
    left_title: str
    left_rows: tuple[KeyValueRow, ...]
    right_title: str
    right_rows: tuple[KeyValueRow, ...]


@dataclass(frozen=True)
class ChecklistRow:
    label: str
    at_collection: bool | None
    at_delivery: bool | None


@dataclass(frozen=True)
class ChecklistData:
    title: str
    item_heading: str
    collection_heading: str
    delivery_heading: str
    rows: tuple[ChecklistRow, ...]


@dataclass(frozen=True)
class RadioRow:
    label: str
    options: tuple[str, ...]
    selected: int | None


@dataclass(frozen=True)
class RadioGroupData:
    title: str
    rows: tuple[RadioRow, ...]
    note: str = ""


@dataclass(frozen=True)
class AcknowledgmentData:
    title: str
    rows: tuple[KeyValueRow, ...]
    confirmed: bool
    confirmation_text: str


@dataclass(frozen=True)
class DamageSummaryData:
    title: str
    rows: tuple[KeyValueRow, ...]


@dataclass(frozen=True)
class DamageRow:
    number: str
    location: str
    damage_type: str
    size: str
    photos: str
    note: str = ""


@dataclass(frozen=True)
class DamageBlockData:
    title: str
    tone: str
    column_headings: tuple[str, str, str, str, str]
    rows: tuple[DamageRow, ...] = ()
    banner: str = ""
    message: str = ""
    trailing_note: str = ""


@dataclass(frozen=True)
class PhotoCell:
    caption: str
    image: bytes | None = field(default=None, repr=False)


@dataclass(frozen=True)
class PhotoBlockData:
    """Up to :data:`PHOTOS_PER_BLOCK` photos laid out as a two-column grid."""

    title: str
    cells: tuple[PhotoCell, ...]
    placeholder: str
    unreadable_text: str


@dataclass(frozen=True)
class DisclaimerData:
    title: str
    text: str


@dataclass(frozen=True)
class SignatureParty:
    heading: str
    name_label: str
    date_label: str
    signed: bool
    stamp_text: str
    unsigned_text: str


@dataclass(frozen=True)
class SignatureData:
    title: str
    statement: str
    parties: tuple[SignatureParty, ...]


@dataclass(frozen=True)
class ReportTemplateData:
    header: HeaderData
    footer: FooterData
    summary: SummaryData
    checklist: ChecklistData
    readings: RadioGroupData
    acknowledgment: AcknowledgmentData
    damage_summary: DamageSummaryData
    damage_blocks: tuple[DamageBlockData, ...]
    disclaimer: DisclaimerData
    signatures: SignatureData
    photo_blocks: tuple[PhotoBlockData, ...] = ()
    title: str = ""
    author: str = ""
    subject: str = ""
    warnings: tuple[str, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_miles(value: int) -> str:
    return f"{value:,}"


def signed(value: int) -> str:
    return f"+{value:,}" if value > 0 else f"{value:,}"


def fuel_text(eighths: int) -> str:
    return f"{eighths}/{FUEL_EIGHTHS_MAX}"


def signed_fuel(delta: int) -> str:
    return f"{'+' if delta > 0 else ''}{delta}/{FUEL_EIGHTHS_MAX}"


def key_count_text(count: int) -> str:
    return f"{count}+" if count >= KEY_COUNT_MAX else str(count)


def format_timestamp(value: datetime | None) -> str:
    return value.strftime("%d/%m/%Y %H:%M") if value is not None else "—"


def format_date(value: datetime | None) -> str:
    return value.strftime("%d/%m/%Y") if value is not None else "—"


def _or_dash(value: str) -> str:
    return value.strip() if value and value.strip() else "—"


def _enum_label(prefix: str, member: object) -> str:
    name = getattr(member, "name", str(member))
    return tr(f"{prefix}_{name}")


def charge_text(level: ChargeLevel | None) -> str:
    return _enum_label("CHARGE", level) if level is not None else tr("NOT_RECORDED")


def tyre_text(condition: TyreCondition | None) -> str:
    return _enum_label("TYRE", condition) if condition is not None else tr("NOT_RECORDED")


# ---------------------------------------------------------------------------
# Section mappers
# ---------------------------------------------------------------------------


def _header(job: JobMeta, config: ReportConfig) -> HeaderData:
    company = config.company
    contact = " • ".join(
        part
        for part in (company.address, company.phone, company.email, company.website)
        if part.strip()
    )
    return HeaderData(
        company_name=company.name,
        company_contact=contact,
        title=config.title.upper(),
        job_label=tr("HEADER_JOB", job=job.job_number),
        registration_label=tr("HEADER_REGISTRATION", registration=job.registration.upper()),
        generated_label=tr("HEADER_GENERATED", generated=format_timestamp(job.generated_at)),
    )


def _footer(job: JobMeta, config: ReportConfig) -> FooterData:
    company = config.company
    year = job.generated_at.year if job.generated_at is not None else ""
    return FooterData(
        line=tr(
            "FOOTER_LINE",
            year=year,
            company=company.name,
            company_number=company.company_number,
            email=company.email,
            phone=company.phone,
        )
    )


def _summary(
    collection: InspectionSnapshot,
    delivery: InspectionSnapshot,
    job: JobMeta,
    comparison: ComparisonResult,
) -> SummaryData:
    left = (
        (tr("JOB_NUMBER"), _or_dash(job.job_number)),
        (tr("CUSTOMER"), _or_dash(job.customer_name or delivery.customer_name)),
        (tr("DRIVER"), _or_dash(job.driver_name)),
        (tr("COLLECTED_FROM"), _or_dash(job.collection_address.one_line())),
        (tr("DELIVERED_TO"), _or_dash(job.delivery_address.one_line())),
    )
    right = (
        (tr("REGISTRATION"), _or_dash(job.registration.upper())),
        (tr("MAKE_MODEL"), _or_dash(job.make_model)),
        (tr("COLOUR"), _or_dash(job.colour)),
        (tr("FUEL_TYPE"), _or_dash(job.fuel_type)),
        (
            tr("MILEAGE"),
            tr(
                "MILEAGE_SUMMARY",
                collection=format_miles(collection.condition.mileage),
                delivery=format_miles(delivery.condition.mileage),
                delta=signed(comparison.mileage_delta),
            ),
        ),
        (
            tr("KEYS"),
            tr(
                "KEYS_SUMMARY",
                collection=key_count_text(collection.key_count),
                delivery=key_count_text(delivery.key_count),
            ),
        ),
    )
    return SummaryData(
        tr("JOB_DETAILS"),
        tuple(KeyValueRow(label, value, SUMMARY_MAX_LINES) for label, value in left),
        tr("VEHICLE_DETAILS"),
        tuple(KeyValueRow(label, value, SUMMARY_MAX_LINES) for label, value in right),
    )


def _checklist(collection: InspectionSnapshot, delivery: InspectionSnapshot) -> ChecklistData:
    rows: list[ChecklistRow] = []
    for name in DOCUMENT_ORDER:
        rows.append(
            ChecklistRow(
                tr("CHECK_DOCUMENT_PROVIDED", document=_enum_label("DOCUMENT", name)),
                collection.document_status(name) == DocumentStatus.PROVIDED,
                delivery.document_status(name) == DocumentStatus.PROVIDED,
            )
        )
    for position in WHEEL_ORDER:
        before = collection.wheel(position)
        after = delivery.wheel(position)
        wheel = _enum_label("WHEEL", position)
        rows.append(
            ChecklistRow(
                tr("CHECK_WHEEL_UNSCUFFED", wheel=wheel),
                (not before.scuffed) if before else None,
                (not after.scuffed) if after else None,
            )
        )
        rows.append(
            ChecklistRow(
                tr("CHECK_TYRE_OK", wheel=wheel),
                (before.tyre_condition == TyreCondition.OK) if before else None,
                (after.tyre_condition == TyreCondition.OK) if after else None,
            )
        )
    before_kit = collection.equipment()
    after_kit = delivery.equipment()
    for item in EquipmentItem:
        if item not in before_kit and item not in after_kit:
            continue
        rows.append(
            ChecklistRow(
                _enum_label("EQUIPMENT", item),
                before_kit.get(item),
                after_kit.get(item),
            )
        )
    return ChecklistData(
        title=tr("VEHICLE_CHECKLIST"),
        item_heading=tr("COLUMN_ITEM"),
        collection_heading=tr("COLUMN_COLLECTION"),
        delivery_heading=tr("COLUMN_DELIVERY"),
        rows=tuple(rows),
    )


def _readings(
    collection: InspectionSnapshot,
    delivery: InspectionSnapshot,
    comparison: ComparisonResult,
) -> RadioGroupData:
    fuel_options = (
        tr("FUEL_EMPTY"),
        *(fuel_text(i) for i in range(1, FUEL_EIGHTHS_MAX)),
        tr("FUEL_FULL"),
    )
    charge_levels = tuple(ChargeLevel)
    charge_options = tuple(_enum_label("CHARGE", level) for level in charge_levels)
    weather_levels = tuple(WeatherCondition)
    weather_options = tuple(_enum_label("WEATHER", w) for w in weather_levels)

    def _index(levels: tuple, value: object) -> int | None:
        return levels.index(value) if value is not None else None

    rows = [
        RadioRow(
            tr("FUEL_AT_COLLECTION"), fuel_options, collection.condition.fuel_level_eighths
        ),
        RadioRow(tr("FUEL_AT_DELIVERY"), fuel_options, delivery.condition.fuel_level_eighths),
    ]
    if collection.condition.charge_level is not None or delivery.condition.charge_level is not None:
        rows.append(
            RadioRow(
                tr("CHARGE_AT_COLLECTION"),
                charge_options,
                _index(charge_levels, collection.condition.charge_level),
            )
        )
        rows.append(
            RadioRow(
                tr("CHARGE_AT_DELIVERY"),
                charge_options,
                _index(charge_levels, delivery.condition.charge_level),
            )
        )
    rows.append(
        RadioRow(
            tr("WEATHER_AT_COLLECTION"),
            weather_options,
            _index(weather_levels, collection.weather),
        )
    )
    rows.append(
        RadioRow(
            tr("WEATHER_AT_DELIVERY"),
            weather_options,
            _index(weather_levels, delivery.weather),
        )
    )
    return RadioGroupData(
        title=tr("FUEL_AND_CONDITIONS"),
        rows=tuple(rows),
        note=tr("FUEL_CHANGE_NOTE", delta=signed_fuel(comparison.fuel_delta)),
    )


def _wheel_change_text(change: WheelChange) -> str:
    parts: list[str] = []
    if change.scuffed_before != change.scuffed_after:
        parts.append(
            tr(
                "WHEEL_SCUFF_CHANGE",
                before=_scuff_text(change.scuffed_before),
                after=_scuff_text(change.scuffed_after),
            )
        )
    if change.tyre_before != change.tyre_after:
        parts.append(
            tr(
                "TYRE_CHANGE",
                before=tyre_text(change.tyre_before),
                after=tyre_text(change.tyre_after),
            )
        )
    return f"{_enum_label('WHEEL', change.wheel)}: {'; '.join(parts)}"


def _scuff_text(scuffed: bool | None) -> str:
    if scuffed is None:
        return tr("NOT_RECORDED")
    return tr("SCUFFED") if scuffed else tr("NOT_SCUFFED")


def _acknowledgment(
    collection: InspectionSnapshot,
    delivery: InspectionSnapshot,
    comparison: ComparisonResult,
) -> AcknowledgmentData:
    rows: list[KeyValueRow] = [
        KeyValueRow(
            tr("MILEAGE"),
            tr(
                "MILEAGE_CHANGE",
                collection=format_miles(collection.condition.mileage),
                delivery=format_miles(delivery.condition.mileage),
                delta=signed(comparison.mileage_delta),
            ),
        ),
        KeyValueRow(
            tr("FUEL_LEVEL"),
            tr(
                "FUEL_CHANGE",
                collection=fuel_text(collection.condition.fuel_level_eighths),
                delivery=fuel_text(delivery.condition.fuel_level_eighths),
                delta=signed_fuel(comparison.fuel_delta),
            ),
        ),
    ]
    if comparison.charge_before is not None or comparison.charge_after is not None:
        rows.append(
            KeyValueRow(
                tr("CHARGE_LEVEL"),
                tr(
                    "CHANGE_FROM_TO",
                    before=charge_text(comparison.charge_before),
                    after=charge_text(comparison.charge_after),
                ),
            )
        )
    rows.append(
        KeyValueRow(
            tr("KEYS"),
            tr(
                "KEYS_CHANGE",
                collection=key_count_text(collection.key_count),
                delivery=key_count_text(delivery.key_count),
                delta=signed(comparison.key_count_delta),
            ),
        )
    )

    if comparison.document_status_changes:
        for i, change in enumerate(comparison.document_status_changes):
            text = tr(
                "DOCUMENT_CHANGE",
                document=_enum_label("DOCUMENT", change.document),
                before=_enum_label("STATUS", change.before),
                after=_enum_label("STATUS", change.after),
            )
            if change.reason_if_missing:
                text = f"{text} ({tr('REASON', reason=change.reason_if_missing)})"
            rows.append(KeyValueRow(tr("DOCUMENTS") if i == 0 else "", text, 2))
    else:
        rows.append(KeyValueRow(tr("DOCUMENTS"), tr("NO_DOCUMENT_CHANGES")))

    if comparison.wheel_changes:
        for i, wheel_change in enumerate(comparison.wheel_changes):
            rows.append(
                KeyValueRow(
                    tr("WHEELS_TYRES") if i == 0 else "", _wheel_change_text(wheel_change), 2
                )
            )
    else:
        rows.append(KeyValueRow(tr("WHEELS_TYRES"), tr("NO_WHEEL_CHANGES")))

    rows.append(
        KeyValueRow(
            tr("COLLECTION_NOTES"),
            collection.notes.strip() or tr("NONE_RECORDED"),
            NOTES_MAX_LINES,
        )
    )
    rows.append(
        KeyValueRow(
            tr("DELIVERY_NOTES"),
            delivery.notes.strip() or tr("NONE_RECORDED"),
            NOTES_MAX_LINES,
        )
    )
    confirmed = delivery.confirmed_by_customer
    return AcknowledgmentData(
        title=tr("DELIVERY_ACKNOWLEDGMENT"),
        rows=tuple(rows),
        confirmed=confirmed,
        confirmation_text=tr("DELIVERY_CONFIRMED") if confirmed else tr("DELIVERY_NOT_CONFIRMED"),
    )


def _damage_row(number: int, marker: DamageMarker) -> DamageRow:
    location = tr(
        "DAMAGE_LOCATION",
        view=_enum_label("VIEW", marker.view),
        x=round(marker.position.x),
        y=round(marker.position.y),
    )
    photos = len(marker.photo_refs)
    return DamageRow(
        number=str(number),
        location=location,
        damage_type=_enum_label("DAMAGE_TYPE", marker.damage_type),
        size=_enum_label("SIZE", marker.size),
        photos=str(photos) if photos else "—",
        note=marker.description.strip(),
    )


def _damage_columns() -> tuple[str, str, str, str, str]:
    return (
        tr("COLUMN_NUMBER"),
        tr("COLUMN_LOCATION"),
        tr("COLUMN_TYPE"),
        tr("COLUMN_SIZE"),
        tr("COLUMN_PHOTOS"),
    )


def _chunk(rows: list[DamageRow], size: int) -> list[list[DamageRow]]:
    return [rows[i : i + size] for i in range(0, len(rows), size)]


def _damage_group(
    markers: tuple[DamageMarker, ...],
    *,
    title: str,
    tone: str,
    empty_banner: str,
    empty_message: str,
    empty_tone: str,
    trailing_note: str = "",
) -> list[DamageBlockData]:
    columns = _damage_columns()
    if not markers:
        return [
            DamageBlockData(
                title=title,
                tone=empty_tone,
                column_headings=columns,
                banner=empty_banner,
                message=empty_message,
            )
        ]
    rows = [_damage_row(i, m) for i, m in enumerate(markers, start=1)]
    chunks = _chunk(rows, DAMAGE_ROWS_PER_BLOCK)
    blocks: list[DamageBlockData] = []
    for i, chunk in enumerate(chunks):
        is_last = i == len(chunks) - 1
        blocks.append(
            DamageBlockData(
                title=title if i == 0 else tr("CONTINUED", title=title),
                tone=tone,
                column_headings=columns,
                rows=tuple(chunk),
                trailing_note=trailing_note if is_last else "",
            )
        )
    return blocks


def _damage(comparison: ComparisonResult) -> tuple[DamageSummaryData, tuple[DamageBlockData, ...]]:
    summary = DamageSummaryData(
        title=tr("DAMAGE_ASSESSMENT"),
        rows=(
            KeyValueRow(tr("DAMAGE_AT_COLLECTION"), str(len(comparison.carried_damage))),
            KeyValueRow(tr("DAMAGE_NEW_AT_DELIVERY"), str(len(comparison.new_damage))),
            KeyValueRow(tr("DAMAGE_TOTAL"), str(comparison.damage_count_total)),
        ),
    )
    blocks = _damage_group(
        comparison.carried_damage,
        title=tr("CARRIED_DAMAGE"),
        tone="warn",
        empty_banner=tr("NO_COLLECTION_DAMAGE"),
        empty_message=tr("NO_COLLECTION_DAMAGE_MESSAGE"),
        empty_tone="neutral",
    )
    blocks += _damage_group(
        comparison.new_damage,
        title=tr("NEW_DAMAGE"),
        tone="error",
        empty_banner=tr("NO_NEW_DAMAGE"),
        empty_message=tr("NO_NEW_DAMAGE_MESSAGE"),
        empty_tone="success",
        trailing_note=tr("NEW_DAMAGE_NOTE"),
    )
    return summary, tuple(blocks)


def _photo_cells(photos: tuple[PhotoRef, ...], caption: str) -> list[PhotoCell]:
    if len(photos) == 1:
        return [PhotoCell(caption, photos[0].data)]
    return [
        PhotoCell(tr("PHOTO_SEQUENCE", caption=caption, index=i, count=len(photos)), p.data)
        for i, p in enumerate(photos, start=1)
    ]


def _marker_photos(markers: tuple[DamageMarker, ...], key: str) -> list[PhotoCell]:
    cells: list[PhotoCell] = []
    for number, marker in enumerate(markers, start=1):
        caption = tr(
            key,
            number=number,
            damage_type=_enum_label("DAMAGE_TYPE", marker.damage_type),
            view=_enum_label("VIEW", marker.view),
        )
        cells.extend(_photo_cells(marker.photo_refs, caption))
    return cells


def _photo_blocks(
    delivery: InspectionSnapshot, comparison: ComparisonResult
) -> tuple[PhotoBlockData, ...]:
    """Photo evidence in report order: new damage, carried damage, delivery gauges.

    Damage numbers match the rows of the damage tables.  No photos means no
    photo blocks at all.
    """
    cells = [
        *_marker_photos(comparison.new_damage, "PHOTO_NEW_DAMAGE"),
        *_marker_photos(comparison.carried_damage, "PHOTO_CARRIED_DAMAGE"),
        *_photo_cells(delivery.condition.odometer_photo_refs, tr("PHOTO_ODOMETER")),
        *_photo_cells(delivery.condition.fuel_gauge_photo_refs, tr("PHOTO_FUEL_GAUGE")),
    ]
    title = tr("PHOTO_EVIDENCE")
    return tuple(
        PhotoBlockData(
            title=title if i == 0 else tr("CONTINUED", title=title),
            cells=tuple(cells[start : start + PHOTOS_PER_BLOCK]),
            placeholder=tr("PHOTO_ON_FILE"),
            unreadable_text=tr("PHOTO_UNREADABLE"),
        )
        for i, start in enumerate(range(0, len(cells), PHOTOS_PER_BLOCK))
    )


def _signatures(
    delivery: InspectionSnapshot, job: JobMeta, config: ReportConfig
) -> SignatureData:
    date = format_date(job.generated_at)
    customer_name = _or_dash(delivery.customer_name or job.customer_name)
    driver_name = _or_dash(job.driver_name)
    return SignatureData(
        title=tr("SIGNATURES"),
        statement=tr("CONFIRMATION_STATEMENT"),
        parties=(
            SignatureParty(
                heading=tr("CUSTOMER_SIGNATURE"),
                name_label=tr("SIGNATURE_NAME", name=customer_name),
                date_label=tr("SIGNATURE_DATE", date=date),
                signed=delivery.has_signature,
                stamp_text=tr("DIGITALLY_SIGNED"),
                unsigned_text=tr("NOT_SIGNED"),
            ),
            SignatureParty(
                heading=tr("COMPANY_SIGNATURE", company=config.company.name),
                name_label=tr("SIGNATURE_NAME", name=driver_name),
                date_label=tr("SIGNATURE_DATE", date=date),
                signed=job.has_driver_signature,
                stamp_text=tr("DIGITALLY_SIGNED"),
                unsigned_text=tr("NOT_SIGNED"),
            ),
        ),
    )


def collect_warnings(
    collection: InspectionSnapshot,
    delivery: InspectionSnapshot,
    comparison: ComparisonResult,
) -> tuple[str, ...]:
    """Audit anomalies worth logging; they are rendered unchanged."""
    warnings: list[str] = []
    if comparison.mileage_delta < 0:
        warnings.append(f"mileage decreased by {-comparison.mileage_delta}")
    if comparison.fuel_delta > 0:
        warnings.append(f"fuel increased by {fuel_text(comparison.fuel_delta)}")
    if comparison.key_count_delta < 0:
        warnings.append(f"key count dropped by {-comparison.key_count_delta}")
    if not delivery.confirmed_by_customer:
        warnings.append("delivery not confirmed by customer")
    if not delivery.has_signature:
        warnings.append("delivery snapshot has no customer signature")
    stray = [m.id for m in collection.damage_markers if m.captured_at_stage != collection.stage]
    if stray:
        warnings.append(f"collection markers tagged as delivery damage: {', '.join(stray)}")
    return tuple(warnings)


def map_report(
    collection: InspectionSnapshot,
    delivery: InspectionSnapshot,
    job: JobMeta,
    comparison: ComparisonResult,
    config: ReportConfig,
) -> ReportTemplateData:
    """Map domain inputs onto the template data consumed by the section renderers."""
    damage_summary, damage_blocks = _damage(comparison)
    return ReportTemplateData(
        header=_header(job, config),
        footer=_footer(job, config),
        summary=_summary(collection, delivery, job, comparison),
        checklist=_checklist(collection, delivery),
        readings=_readings(collection, delivery, comparison),
        acknowledgment=_acknowledgment(collection, delivery, comparison),
        damage_summary=damage_summary,
        damage_blocks=damage_blocks,
        disclaimer=DisclaimerData(tr("DISCLAIMER_TITLE"), tr("DISCLAIMER_TEXT")),
        signatures=_signatures(delivery, job, config),
        photo_blocks=_photo_blocks(delivery, comparison),
        title=f"{config.title} {job.job_number}",
        author=config.author,
        subject=tr("PDF_SUBJECT", registration=job.registration.upper()),
        warnings=collect_warnings(collection, delivery, comparison),
    )
