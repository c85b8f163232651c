"""
Blood pressure category classifier.

Maps a systolic/diastolic pair to a clinical category. Each component is
bucketed independently against its own thresholds, then the two levels are
combined by severity rank:

    high (stage1-3) > highNormal > low > normal > optimal

The displayed label always shows both component levels. The advisory
message follows the overall level, except that a low component combined
with a high or high-normal one gets the mixed-reading message.

All functions here are pure and deterministic. Inputs are trusted to be
positive integers; anything below the first threshold is `low`.
"""

import logging
from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional

from bp_svc.core.bp_levels import (
    BPLevel,
    ThresholdTable,
    diastolic_thresholds,
    get_level_meta,
    mixed_reading_message,
    systolic_thresholds,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BPCategory:
    """
    Classification result for a reading.

    Attributes:
        label: Two-part component label, e.g. "S: High-1 | D: Normal"
        color: Display color of the overall level
        message: Advisory text followed by both component long labels
        level: Overall (rank-combined) level
        systolic_level: Level of the systolic value alone
        diastolic_level: Level of the diastolic value alone
        is_mixed: True when one component is low and the other is high or high-normal
    """
    label: str
    color: str
    message: str
    level: BPLevel
    systolic_level: BPLevel
    diastolic_level: BPLevel
    is_mixed: bool

    @property
    def overall_label(self) -> str:
        """Long label of the overall level, for single-word badges."""
        if self.is_mixed:
            return "Mixed"
        return get_level_meta(self.level).long_label


# =============================================================================
# COMPONENT LEVELS
# =============================================================================

def _level_for(value: int, table: ThresholdTable) -> BPLevel:
    # Exclusive upper bounds: a value equal to a bound belongs to the next bucket
    return table.levels[bisect_right(table.bounds, value)]


def systolic_level(value: int) -> BPLevel:
    """Bucket a systolic value: <90 low, <120 optimal, <130 normal, <140 highNormal,
    <160 stage1, <180 stage2, else stage3."""
    return _level_for(value, systolic_thresholds())


def diastolic_level(value: int) -> BPLevel:
    """Bucket a diastolic value: <60 low, <80 optimal, <85 normal, <90 highNormal,
    <100 stage1, <110 stage2, else stage3."""
    return _level_for(value, diastolic_thresholds())


# =============================================================================
# COMBINATION
# =============================================================================

def overall_high_level(sys_level: BPLevel, dia_level: BPLevel) -> Optional[BPLevel]:
    """
    Get the more severe of two levels if it is a hypertension stage.

    Only stage1/2/3 have a non-zero rank, so low, optimal, normal and
    highNormal never produce an overall high level.

    Returns:
        The higher-ranked level when its rank is at least 1, otherwise None
    """
    higher = sys_level if sys_level.rank >= dia_level.rank else dia_level
    if higher.rank == 0:
        return None
    return higher


def resolve_overall_level(sys_level: BPLevel, dia_level: BPLevel) -> BPLevel:
    """Combine two component levels: high > highNormal > low > normal > optimal."""
    levels = (sys_level, dia_level)

    high = overall_high_level(sys_level, dia_level)
    if high is not None:
        return high
    if BPLevel.HIGH_NORMAL in levels:
        return BPLevel.HIGH_NORMAL
    if BPLevel.LOW in levels:
        return BPLevel.LOW
    if BPLevel.NORMAL in levels:
        return BPLevel.NORMAL
    if levels == (BPLevel.OPTIMAL, BPLevel.OPTIMAL):
        return BPLevel.OPTIMAL
    raise ValueError(f"Unhandled level combination: {sys_level.value}/{dia_level.value}")


def is_mixed_reading(sys_level: BPLevel, dia_level: BPLevel) -> bool:
    """True when a low component co-occurs with a high or high-normal one."""
    levels = (sys_level, dia_level)
    has_low = BPLevel.LOW in levels
    has_elevated = (
        overall_high_level(sys_level, dia_level) is not None
        or BPLevel.HIGH_NORMAL in levels
    )
    return has_low and has_elevated


# =============================================================================
# PUBLIC API
# =============================================================================

def classify(systolic: int, diastolic: int) -> BPCategory:
    """
    Classify a blood pressure reading.

    Args:
        systolic: Systolic pressure in mmHg
        diastolic: Diastolic pressure in mmHg

    Returns:
        BPCategory with label, color and message

    Example:
        >>> classify(185, 125).color
        '#991b1b'
        >>> classify(110, 70).label
        'S: Optimal | D: Optimal'
    """
    sys_level = systolic_level(systolic)
    dia_level = diastolic_level(diastolic)
    level = resolve_overall_level(sys_level, dia_level)
    mixed = is_mixed_reading(sys_level, dia_level)

    overall_meta = get_level_meta(level)
    sys_meta = get_level_meta(sys_level)
    dia_meta = get_level_meta(dia_level)

    base_message = mixed_reading_message() if mixed else overall_meta.message

    return BPCategory(
        label=f"S: {sys_meta.short_label} | D: {dia_meta.short_label}",
        color=overall_meta.color,
        message=(
            f"{base_message} "
            f"Systolic: {sys_meta.long_label}. Diastolic: {dia_meta.long_label}."
        ),
        level=level,
        systolic_level=sys_level,
        diastolic_level=dia_level,
        is_mixed=mixed,
    )
