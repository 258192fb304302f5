"""
Settlement Tool Configuration Settings
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class PrecisionConfig:
    """Rounding and comparison configuration."""
    extremum_decimals: int = 4      # Max/Min/Avg, distance, delta total
    ratio_decimals: int = 6         # Relative settlement ratio
    signed_decimals: int = 2        # "-3.20/+1.10" extremum strings
    tie_tolerance: float = 1e-9     # |a - b| < tol counts as a tie

    # Display formats for measurement rows
    mark_decimals: int = 3
    settl_decimals: int = 1
    total_decimals: int = 1


@dataclass
class StatusMarkerConfig:
    """
    Raw-text markers (lowercase stems) that annotate a reading.

    Survey sheets are filled in Russian, so the stems are Russian:
        "нов"     - new mark (first cycle it appears in)
        "нет ..." - no access / not observed / not measured
        "уничт"   - destroyed, demolished, dismantled
    """
    new_stem: str = "нов"
    no_access_stem: str = "нет"
    no_access_qualifiers: List[str] = field(
        default_factory=lambda: ["доступ", "наблю", "изм"]
    )
    destroyed_stems: List[str] = field(
        default_factory=lambda: ["уничт", "снес", "демонт", "разруш"]
    )

    # Narrower markers used by the general report status lists
    report_no_access: str = "нет доступ"
    report_new: str = "нов"
    report_destroyed: str = "унич"

    # Stems that identify a header line in pasted tables
    header_stems: List[str] = field(
        default_factory=lambda: ["отмет", "осад", "суммар", "№", "марка", "cycle", "id"]
    )


@dataclass
class LimitConfig:
    """
    Default exceedance limits (mm for absolute, ratio for relative).

    None means the limit is disabled.
    """
    max_nomen: Optional[float] = None        # Standards-based absolute limit
    max_calculated: Optional[float] = None   # Project/calculated absolute limit
    rel_nomen: Optional[float] = None        # Standards-based relative limit
    rel_calculated: Optional[float] = None   # Project/calculated relative limit


@dataclass
class Settings:
    """Main settings container."""
    precision: PrecisionConfig = field(default_factory=PrecisionConfig)
    markers: StatusMarkerConfig = field(default_factory=StatusMarkerConfig)
    limits: LimitConfig = field(default_factory=LimitConfig)

    # Units: all storage is in millimeters, these apply at I/O boundaries
    coord_unit: str = 'mm'
    display_unit: str = 'mm'

    # Output formatting
    encoding: str = 'utf-8'
    group_name_prefix: str = "Группа"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings


def has_new_marker(text: str) -> bool:
    """Check if raw text marks a new point."""
    if not text:
        return False
    return settings.markers.new_stem in text.lower()


def has_no_access_marker(text: str) -> bool:
    """Check if raw text marks a point without access."""
    if not text:
        return False
    normalized = text.lower()
    markers = settings.markers
    return markers.no_access_stem in normalized and any(
        q in normalized for q in markers.no_access_qualifiers
    )


def has_destroyed_marker(text: str) -> bool:
    """Check if raw text marks a destroyed point."""
    if not text:
        return False
    normalized = text.lower()
    return any(stem in normalized for stem in settings.markers.destroyed_stems)
