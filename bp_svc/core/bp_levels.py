"""
Blood pressure level registry - single source of truth for level metadata.

This module provides:
- BPLevel enum (the closed set of clinical severity buckets)
- LevelMeta dataclass (labels, color, rank, advisory message)
- YAML-based loading and validation of bp_levels.yaml
- Component threshold tables for systolic and diastolic values

The table is fixed: it ships with the package, is loaded exactly once and is
validated to be total over BPLevel. Nothing in it is derived from readings.
YAML access is encapsulated here - no other module reads bp_levels.yaml.

Usage:
    from bp_svc.core.bp_levels import BPLevel, get_level_meta, systolic_thresholds

    meta = get_level_meta(BPLevel.STAGE1)
    meta.short_label  # "High-1"
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

logger = logging.getLogger(__name__)


# =============================================================================
# LEVEL ENUM & METADATA
# =============================================================================

class BPLevel(str, Enum):
    """Clinical severity bucket derived from a single pressure value."""

    LOW = "low"
    OPTIMAL = "optimal"
    NORMAL = "normal"
    HIGH_NORMAL = "highNormal"
    STAGE1 = "stage1"
    STAGE2 = "stage2"
    STAGE3 = "stage3"

    @property
    def rank(self) -> int:
        """Severity rank; only the stage levels rank above zero."""
        return get_level_meta(self).rank

    @property
    def is_high(self) -> bool:
        """True for stage1, stage2 and stage3."""
        return self.rank > 0


@dataclass(frozen=True)
class LevelMeta:
    """
    Immutable display metadata for a BPLevel.

    Attributes:
        level: The level this entry describes
        short_label: Compact label used in the two-part category label
        long_label: Label used in advisory messages
        color: Hex color code for display
        rank: Severity rank (0 for low/optimal/normal/highNormal)
        message: Base advisory message when this is the overall level
    """
    level: BPLevel
    short_label: str
    long_label: str
    color: str
    rank: int
    message: str


@dataclass(frozen=True)
class ThresholdTable:
    """
    Component breakpoints as exclusive upper bounds.

    bounds[i] pairs with levels[i]; a value >= bounds[-1] maps to levels[-1],
    so len(levels) == len(bounds) + 1.
    """
    bounds: Tuple[int, ...]
    levels: Tuple[BPLevel, ...]


@dataclass(frozen=True)
class LevelRegistry:
    """The complete, validated contents of bp_levels.yaml."""
    meta: Dict[BPLevel, LevelMeta]
    mixed_message: str
    systolic: ThresholdTable
    diastolic: ThresholdTable


# =============================================================================
# YAML CONFIGURATION LOADING & VALIDATION
# =============================================================================

# Combination picks the higher-ranked component, so ranks are fixed
EXPECTED_RANKS: Dict[BPLevel, int] = {
    BPLevel.LOW: 0,
    BPLevel.OPTIMAL: 0,
    BPLevel.NORMAL: 0,
    BPLevel.HIGH_NORMAL: 0,
    BPLevel.STAGE1: 1,
    BPLevel.STAGE2: 2,
    BPLevel.STAGE3: 3,
}

def _get_config_path() -> Path:
    """Get the path to the level configuration file."""
    return Path(__file__).parent / 'bp_levels.yaml'


def _load_yaml_config() -> Dict[str, Any]:
    """
    Load and parse the YAML configuration file.

    Raises:
        FileNotFoundError: If bp_levels.yaml is not found
        yaml.YAMLError: If YAML parsing fails
    """
    config_path = _get_config_path()
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        logger.error("Level config file not found", extra={'path': str(config_path)})
        raise
    except yaml.YAMLError as e:
        logger.error("Failed to parse level config", extra={'path': str(config_path), 'error': str(e)})
        raise


def _parse_level(value: Any, where: str) -> BPLevel:
    try:
        return BPLevel(value)
    except ValueError:
        raise ValueError(f"{where}: unknown level '{value}'")


def _parse_meta_entry(raw: Dict[str, Any], index: int) -> LevelMeta:
    """
    Validate and parse a single level entry.

    Raises:
        ValueError: If required fields are missing or invalid
    """
    required_fields = ['level', 'short_label', 'long_label', 'color', 'rank', 'message']
    for field_name in required_fields:
        if field_name not in raw:
            raise ValueError(f"Level at index {index} is missing required field: '{field_name}'")

    level = _parse_level(raw['level'], f"Level at index {index}")

    color = raw['color']
    if not re.match(r'^#[0-9A-Fa-f]{6}$', str(color)):
        raise ValueError(f"Level '{level.value}' has invalid color format: '{color}'")

    rank = raw['rank']
    if not isinstance(rank, int) or isinstance(rank, bool) or rank != EXPECTED_RANKS[level]:
        raise ValueError(
            f"Level '{level.value}' has invalid rank: '{rank}' (expected {EXPECTED_RANKS[level]})"
        )

    return LevelMeta(
        level=level,
        short_label=str(raw['short_label']),
        long_label=str(raw['long_label']),
        color=str(color).lower(),
        rank=rank,
        message=str(raw['message']),
    )


def _parse_threshold_table(raw: Dict[str, Any], component: str) -> ThresholdTable:
    """
    Validate and parse a component threshold table.

    Raises:
        ValueError: If bounds are not strictly increasing or levels are unknown
    """
    if not raw or 'bounds' not in raw or 'above' not in raw:
        raise ValueError(f"Thresholds for '{component}' must define 'bounds' and 'above'")

    bounds: List[int] = []
    levels: List[BPLevel] = []
    for i, pair in enumerate(raw['bounds']):
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise ValueError(f"Threshold {i} for '{component}' must be [bound, level]")
        bound, level = pair
        if not isinstance(bound, int):
            raise ValueError(f"Threshold {i} for '{component}' has non-integer bound: '{bound}'")
        if bounds and bound <= bounds[-1]:
            raise ValueError(f"Thresholds for '{component}' must be strictly increasing at index {i}")
        bounds.append(bound)
        levels.append(_parse_level(level, f"Threshold {i} for '{component}'"))

    levels.append(_parse_level(raw['above'], f"Threshold 'above' for '{component}'"))
    return ThresholdTable(bounds=tuple(bounds), levels=tuple(levels))


@lru_cache(maxsize=1)
def load_level_registry() -> LevelRegistry:
    """
    Load, validate and cache the level registry from YAML.

    This function is cached so the YAML file is loaded exactly once during
    the lifetime of the process.

    Raises:
        ValueError: If the table is incomplete or malformed
    """
    config = _load_yaml_config() or {}

    meta: Dict[BPLevel, LevelMeta] = {}
    for i, raw in enumerate(config.get('levels') or []):
        entry = _parse_meta_entry(raw, i)
        if entry.level in meta:
            raise ValueError(f"Duplicate level entry: '{entry.level.value}'")
        meta[entry.level] = entry

    missing = [level.value for level in BPLevel if level not in meta]
    if missing:
        raise ValueError(f"Level table is missing entries for: {', '.join(missing)}")

    mixed_message = config.get('mixed_message')
    if not mixed_message:
        raise ValueError("Level table is missing 'mixed_message'")

    thresholds = config.get('thresholds') or {}
    registry = LevelRegistry(
        meta=meta,
        mixed_message=str(mixed_message),
        systolic=_parse_threshold_table(thresholds.get('systolic'), 'systolic'),
        diastolic=_parse_threshold_table(thresholds.get('diastolic'), 'diastolic'),
    )

    logger.debug("Level registry loaded", extra={'levels': len(meta)})
    return registry


# =============================================================================
# PUBLIC API
# =============================================================================

def get_level_meta(level: BPLevel) -> LevelMeta:
    """Get the display metadata for a level."""
    return load_level_registry().meta[level]


def list_levels() -> Dict[BPLevel, LevelMeta]:
    """List all level metadata in severity order."""
    return dict(load_level_registry().meta)


def mixed_reading_message() -> str:
    """Get the advisory message for a low component combined with a high one."""
    return load_level_registry().mixed_message


def systolic_thresholds() -> ThresholdTable:
    """Get the systolic threshold table."""
    return load_level_registry().systolic


def diastolic_thresholds() -> ThresholdTable:
    """Get the diastolic threshold table."""
    return load_level_registry().diastolic
