"""Proof-of-delivery assembler.

Validates the inputs, runs the comparison engine, maps everything onto
template data and hands a fixed sequence of section blocks to the page
composer.  The section order is part of the document's identity and is
the same for every report.
"""

from __future__ import annotations

import logging

from ..comparison import compare
from ..config import ReportConfig, default_config
from ..domain_models import InspectionSnapshot, JobMeta, Stage
from ..errors import (
    MissingMetadataError,
    MissingSnapshotError,
    ReportError,
    ReportGenerationError,
)
from .pdf_document import ChromeBlock, ComposedDocument, PageComposer, SectionBlock
from .pdf_helpers import font_set_from_files, use_fonts
from .pdf_sections import (
    AcknowledgmentSection,
    ChecklistSection,
    DamageBlockSection,
    DamageSummarySection,
    DisclaimerSection,
    FooterSection,
    HeaderSection,
    PhotoEvidenceSection,
    RadioGroupSection,
    SignatureSection,
    SummarySection,
)
from .report_data import ReportTemplateData, map_report

LOGGER = logging.getLogger(__name__)

_HEADER = HeaderSection()
_FOOTER = FooterSection()
_SUMMARY = SummarySection()
_CHECKLIST = ChecklistSection()
_READINGS = RadioGroupSection()
_ACKNOWLEDGMENT = AcknowledgmentSection()
_DAMAGE_SUMMARY = DamageSummarySection()
_DAMAGE_BLOCK = DamageBlockSection()
_PHOTOS = PhotoEvidenceSection()
_DISCLAIMER = DisclaimerSection()
_SIGNATURES = SignatureSection()


def validate_snapshots(
    collection: InspectionSnapshot | None, delivery: InspectionSnapshot | None
) -> tuple[InspectionSnapshot, InspectionSnapshot]:
    if collection is None:
        raise MissingSnapshotError("Collection snapshot is required")
    if delivery is None:
        raise MissingSnapshotError("Delivery snapshot is required")
    if collection.stage != Stage.COLLECTION:
        raise MissingSnapshotError(
            f"Expected a collection snapshot, got stage {str(collection.stage)!r}"
        )
    if delivery.stage != Stage.DELIVERY:
        raise MissingSnapshotError(
            f"Expected a delivery snapshot, got stage {str(delivery.stage)!r}"
        )
    return collection, delivery


def validate_inputs(
    collection: InspectionSnapshot | None,
    delivery: InspectionSnapshot | None,
    job_meta: JobMeta | None,
) -> tuple[InspectionSnapshot, InspectionSnapshot, JobMeta]:
    """Return the inputs unchanged, or raise a :class:`ReportError` subclass.

    Runs before any rendering work starts.
    """
    collection, delivery = validate_snapshots(collection, delivery)
    if job_meta is None:
        raise MissingMetadataError(["job_number", "registration", "generated_at"])
    missing = job_meta.missing_required_fields()
    if missing:
        raise MissingMetadataError(missing)
    return collection, delivery, job_meta


def build_sections(data: ReportTemplateData) -> list[SectionBlock]:
    """Fixed section order: summary, checklist, readings, acknowledgment,
    damage, photos, disclaimer, signatures."""
    sections = [
        SectionBlock(_SUMMARY, data.summary),
        SectionBlock(_CHECKLIST, data.checklist),
        SectionBlock(_READINGS, data.readings),
        SectionBlock(_ACKNOWLEDGMENT, data.acknowledgment),
        SectionBlock(_DAMAGE_SUMMARY, data.damage_summary),
    ]
    sections.extend(
        SectionBlock(_DAMAGE_BLOCK, block, name=f"damage_{i}")
        for i, block in enumerate(data.damage_blocks, start=1)
    )
    sections.extend(
        SectionBlock(_PHOTOS, block, name=f"photos_{i}")
        for i, block in enumerate(data.photo_blocks, start=1)
    )
    sections.append(SectionBlock(_DISCLAIMER, data.disclaimer))
    sections.append(SectionBlock(_SIGNATURES, data.signatures))
    return sections


def compose_report(
    collection: InspectionSnapshot | None,
    delivery: InspectionSnapshot | None,
    job_meta: JobMeta | None,
    *,
    config: ReportConfig | None = None,
) -> ComposedDocument:
    """Build the full proof-of-delivery document and return it with its layout."""
    collection, delivery, job_meta = validate_inputs(collection, delivery, job_meta)
    cfg = config or default_config()
    try:
        font_set = font_set_from_files(cfg.fonts.regular, cfg.fonts.bold, cfg.fonts.italic)
        comparison = compare(collection, delivery)
        data = map_report(collection, delivery, job_meta, comparison, cfg)
        for warning in data.warnings:
            LOGGER.warning("Job %s: %s", job_meta.job_number, warning)
        composer = PageComposer(
            cfg.page_size,
            header=ChromeBlock(_HEADER, data.header),
            footer=ChromeBlock(_FOOTER, data.footer),
            title=data.title,
            author=data.author,
            subject=data.subject,
        )
        with use_fonts(font_set):
            document = composer.compose(build_sections(data))
    except ReportError:
        raise
    except Exception as exc:
        LOGGER.error("PDF generation failed for job %s.", job_meta.job_number, exc_info=True)
        raise ReportGenerationError(
            f"PDF generation failed for job {job_meta.job_number}"
        ) from exc
    LOGGER.info(
        "Generated proof of delivery for job %s: %d page(s), %d new / %d carried damage",
        job_meta.job_number,
        document.page_count,
        len(comparison.new_damage),
        len(comparison.carried_damage),
    )
    return document


def assemble(
    collection: InspectionSnapshot | None,
    delivery: InspectionSnapshot | None,
    job_meta: JobMeta | None,
    *,
    config: ReportConfig | None = None,
) -> bytes:
    """Return the proof-of-delivery PDF bytes for one job.

    Identical inputs produce identical bytes: the document timestamp comes
    from ``job_meta.generated_at`` and the canvas is written in invariant
    mode.
    """
    return compose_report(collection, delivery, job_meta, config=config).pdf
