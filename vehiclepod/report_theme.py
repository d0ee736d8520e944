from __future__ import annotations

# Print-friendly palette shared by every report section.
REPORT_COLORS = {
    "ink": "#1a1c24",
    "primary": "#00abe7",
    "border": "#c4c7d0",
    "surface": "#f8f9fb",
    "surface_alt": "#f1f2f6",
    "success": "#0f9d58",
    "warning": "#b35d00",
    "danger": "#c5221f",
    "table_header_bg": "#f1f2f6",
    "table_row_border": "#dcdfe6",
    "text_primary": "#1a1c24",
    "text_secondary": "#52555e",
    "text_muted": "#6b6e78",
    # Card tone backgrounds
    "card_neutral_bg": "#f8f9fb",
    "card_success_bg": "#e7f5ee",
    "card_warn_bg": "#fef3e0",
    "card_error_bg": "#fce8e6",
    # Card tone borders
    "card_neutral_border": "#c4c7d0",
    "card_success_border": "#a8dab5",
    "card_warn_border": "#f5c98a",
    "card_error_border": "#f5a6a2",
    # Zebra striping
    "table_zebra_bg": "#fafafc",
}

TONE_COLORS: dict[str, tuple[str, str, str]] = {
    # tone -> (background, border, accent text)
    "neutral": (
        REPORT_COLORS["card_neutral_bg"],
        REPORT_COLORS["card_neutral_border"],
        REPORT_COLORS["text_primary"],
    ),
    "success": (
        REPORT_COLORS["card_success_bg"],
        REPORT_COLORS["card_success_border"],
        REPORT_COLORS["success"],
    ),
    "warn": (
        REPORT_COLORS["card_warn_bg"],
        REPORT_COLORS["card_warn_border"],
        REPORT_COLORS["warning"],
    ),
    "error": (
        REPORT_COLORS["card_error_bg"],
        REPORT_COLORS["card_error_border"],
        REPORT_COLORS["danger"],
    ),
}
