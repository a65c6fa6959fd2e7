"""
Configuration for the CV parsing service.

Two layers:
- LayoutConfig: tuning parameters for the layout-aware line normalizer,
  passed explicitly into the parsing core.
- Settings: web-application settings read from CVPARSE_* environment
  variables. The parsing core never reads the environment itself.
"""

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class LayoutConfig:
    """Thresholds used when grouping positioned items into rows and columns."""
    row_tolerance_ratio: float = 0.6  # x median glyph height
    min_row_tolerance: float = 3.0
    default_glyph_height: float = 12.0
    word_gap_ratio: float = 1.0  # horizontal gap (x median height) joined as a two-space gap
    paragraph_gap_ratio: float = 2.0
    min_rows_for_columns: int = 12
    first_page_min_rows: int = 30
    min_spread_ratio: float = 0.35  # of page width
    histogram_buckets: int = 12
    min_bucket_count: int = 2
    left_peak_ratio: float = 0.45
    right_peak_ratio: float = 0.55


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    extract_workers: int = 1
    max_upload_bytes: int = 10 * 1024 * 1024
    pdf_layout: bool = True
    layout: LayoutConfig = field(default_factory=LayoutConfig)


def load_settings() -> Settings:
    """Build Settings from the environment, falling back to defaults for unset variables."""
    layout = LayoutConfig(
        min_rows_for_columns=_env_int("CVPARSE_MIN_ROWS_FOR_COLUMNS", LayoutConfig.min_rows_for_columns),
        first_page_min_rows=_env_int("CVPARSE_FIRST_PAGE_MIN_ROWS", LayoutConfig.first_page_min_rows),
        min_spread_ratio=_env_float("CVPARSE_MIN_SPREAD_RATIO", LayoutConfig.min_spread_ratio),
        paragraph_gap_ratio=_env_float("CVPARSE_PARAGRAPH_GAP_RATIO", LayoutConfig.paragraph_gap_ratio),
    )
    return Settings(
        log_level=os.getenv("CVPARSE_LOG_LEVEL", "INFO").upper(),
        extract_workers=max(1, _env_int("CVPARSE_EXTRACT_WORKERS", 1)),
        max_upload_bytes=_env_int("CVPARSE_MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        pdf_layout=os.getenv("CVPARSE_PDF_LAYOUT", "1").strip().lower() not in {"0", "false", "no", "off"},
        layout=layout,
    )
