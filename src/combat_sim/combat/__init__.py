"""Combat simulation engine.

This module provides the damage and penetration model including:
- Curve evaluation for ballistic and armor curves
- Zone to body part and armor resolution
- Penetration rolls, blunt damage and armor durability loss
- Per-shot resolution and per-zone kill simulation
- Monte Carlo kill statistics and calibration against game data
"""

# Curves
from .curves import (
    BezierSegment,
    bezier_segments,
    curve_from_pairs,
    curve_max,
    evaluate,
    sample_curve,
    validate_curve,
)

# Zones
from .zones import (
    ZoneProtection,
    build_zone_protection,
    find_covering_armor,
    get_body_part_for_zone,
    get_total_body_hp,
    get_vital_body_parts,
    get_zone,
    get_zones_for_body_part,
    resolve_zone_protection,
)

# Penetration
from .penetration import (
    PenetrationResult,
    damage_at_range,
    effective_armor_class,
    penetration_at_range,
    penetration_chance,
    resolve_shot,
)

# Shots
from .shot import Shot, ZoneState, fire_shot, initial_zone_state, next_state

# Simulation
from .simulation import (
    ZoneCalculation,
    ZoneOutcome,
    calculate_combat_results,
    calculate_time_to_kill,
    simulate_zone,
)

# Statistics
from .statistics import (
    AttackerSummary,
    CombatSimulator,
    CombatStatistics,
    ShotDistribution,
    SortBy,
    calculate_attacker_summary,
    get_confidence_interval,
    sort_zone_calculations,
)

# Calibration
from .calibration import (
    CalibrationResult,
    CalibrationSummary,
    SingleShotTestCase,
    run_calibration,
    run_single_case,
    summarize,
)

__all__ = [
    # Curves
    "BezierSegment",
    "bezier_segments",
    "curve_from_pairs",
    "curve_max",
    "evaluate",
    "sample_curve",
    "validate_curve",
    # Zones
    "ZoneProtection",
    "build_zone_protection",
    "find_covering_armor",
    "get_body_part_for_zone",
    "get_total_body_hp",
    "get_vital_body_parts",
    "get_zone",
    "get_zones_for_body_part",
    "resolve_zone_protection",
    # Penetration
    "PenetrationResult",
    "damage_at_range",
    "effective_armor_class",
    "penetration_at_range",
    "penetration_chance",
    "resolve_shot",
    # Shots
    "Shot",
    "ZoneState",
    "fire_shot",
    "initial_zone_state",
    "next_state",
    # Simulation
    "ZoneCalculation",
    "ZoneOutcome",
    "calculate_combat_results",
    "calculate_time_to_kill",
    "simulate_zone",
    # Statistics
    "AttackerSummary",
    "CombatSimulator",
    "CombatStatistics",
    "ShotDistribution",
    "SortBy",
    "calculate_attacker_summary",
    "get_confidence_interval",
    "sort_zone_calculations",
    # Calibration
    "CalibrationResult",
    "CalibrationSummary",
    "SingleShotTestCase",
    "run_calibration",
    "run_single_case",
    "summarize",
]
