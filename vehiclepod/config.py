from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from reportlab.lib.pagesizes import A4, LETTER

PACKAGE_DIR = Path(__file__).resolve().parent
LOGGER = logging.getLogger(__name__)

PAGE_SIZES: dict[str, tuple[float, float]] = {
    "A4": A4,
    "LETTER": LETTER,
}

DEFAULT_CONFIG: dict[str, Any] = {
    "company": {
        "name": "OVM Ltd",
        "address": "272 Bath Street, Glasgow, G2 4JR",
        "phone": "0141 459 1302",
        "email": "info@ovmtransport.com",
        "website": "www.ovmtransport.com",
        "company_number": "SC834621",
    },
    "report": {
        "page_size": "A4",
        "title": "Proof of Delivery",
        "author": "OVM Management System",
        "fonts": {
            "regular": None,
            "bold": None,
            "italic": None,
        },
    },
}


def documented_default_config() -> dict[str, Any]:
    """Return defaults in the shape documented by config.example.yaml."""
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@dataclass(slots=True)
class CompanyConfig:
    name: str
    address: str
    phone: str
    email: str
    website: str
    company_number: str

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("company.name must not be empty")
        if not self.company_number.strip():
            raise ValueError("company.company_number must not be empty")


@dataclass(slots=True)
class FontConfig:
    """Optional TrueType faces; without a regular face the standard Helvetica family is used."""

    regular: Path | None = None
    bold: Path | None = None
    italic: Path | None = None

    def __post_init__(self) -> None:
        if self.regular is None and (self.bold is not None or self.italic is not None):
            raise ValueError("report.fonts.regular is required when bold or italic is set")
        for key in ("regular", "bold", "italic"):
            path = getattr(self, key)
            if path is not None and not path.is_file():
                raise ValueError(f"report.fonts.{key} font file not found: {path}")


@dataclass(slots=True)
class ReportConfig:
    company: CompanyConfig
    page_size_name: str
    title: str
    author: str
    fonts: FontConfig = field(default_factory=FontConfig)
    config_path: Path | None = None

    def __post_init__(self) -> None:
        normalized = self.page_size_name.strip().upper()
        if normalized not in PAGE_SIZES:
            raise ValueError(
                f"report.page_size must be one of {sorted(PAGE_SIZES)}, "
                f"got {self.page_size_name!r}"
            )
        self.page_size_name = normalized
        if not self.title.strip():
            LOGGER.warning("report.title is empty; using %r", DEFAULT_CONFIG["report"]["title"])
            self.title = str(DEFAULT_CONFIG["report"]["title"])

    @property
    def page_size(self) -> tuple[float, float]:
        return PAGE_SIZES[self.page_size_name]


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a YAML object at the top level.")
        return data


def _font_path(value: Any, base_dir: Path) -> Path | None:
    """Font paths are relative to the config file's directory."""
    if value is None or not str(value).strip():
        return None
    path = Path(str(value).strip()).expanduser()
    return path if path.is_absolute() else base_dir / path


def config_from_dict(merged: dict[str, Any], config_path: Path | None = None) -> ReportConfig:
    company = merged.get("company", {})
    report = merged.get("report", {})
    if not isinstance(company, dict) or not isinstance(report, dict):
        raise ValueError("company and report sections must be YAML objects")
    fonts = report.get("fonts") or {}
    if not isinstance(fonts, dict):
        raise ValueError("report.fonts must be a YAML object")
    base_dir = config_path.parent if config_path is not None else Path.cwd()
    return ReportConfig(
        company=CompanyConfig(
            name=str(company.get("name") or ""),
            address=str(company.get("address") or ""),
            phone=str(company.get("phone") or ""),
            email=str(company.get("email") or ""),
            website=str(company.get("website") or ""),
            company_number=str(company.get("company_number") or ""),
        ),
        page_size_name=str(report.get("page_size") or "A4"),
        title=str(report.get("title") or ""),
        author=str(report.get("author") or ""),
        fonts=FontConfig(
            regular=_font_path(fonts.get("regular"), base_dir),
            bold=_font_path(fonts.get("bold"), base_dir),
            italic=_font_path(fonts.get("italic"), base_dir),
        ),
        config_path=config_path,
    )


def default_config() -> ReportConfig:
    return config_from_dict(deepcopy(DEFAULT_CONFIG))


def load_config(config_path: Path | None = None) -> ReportConfig:
    """Load report configuration, falling back to defaults for a missing file."""
    if config_path is None:
        return default_config()
    path = config_path.resolve()
    override = _read_config_file(path)
    merged = _deep_merge(DEFAULT_CONFIG, override)
    cfg = config_from_dict(merged, config_path=path)
    LOGGER.info(
        "Loaded report config from %s (page size %s, company %s)",
        path,
        cfg.page_size_name,
        cfg.company.name,
    )
    return cfg
