"""Character progression: XP, class features and level-up."""

from rules_engine.progression.xp import (
    MAX_LEVEL,
    XP_THRESHOLDS,
    XPProgress,
    can_level_up,
    level_from_xp,
    xp_for_level,
    xp_progress,
)
from rules_engine.progression.class_features import (
    ClassFeature,
    FeatureType,
    asi_levels,
    features_at_level,
    features_up_to_level,
    hit_die_for_class,
    requires_asi,
    requires_subclass,
    subclass_level,
)
from rules_engine.progression.level_up import (
    HPOptions,
    LevelUpChoices,
    LevelUpRequirements,
    ProgressionCharacter,
    ValidationResult,
    apply_level_up,
    hp_increase,
    level_up_requirements,
    validate_level_up_choices,
)

__all__ = [
    # XP
    "MAX_LEVEL",
    "XP_THRESHOLDS",
    "XPProgress",
    "can_level_up",
    "level_from_xp",
    "xp_for_level",
    "xp_progress",
    # Class features
    "ClassFeature",
    "FeatureType",
    "asi_levels",
    "features_at_level",
    "features_up_to_level",
    "hit_die_for_class",
    "requires_asi",
    "requires_subclass",
    "subclass_level",
    # Level-up
    "HPOptions",
    "LevelUpChoices",
    "LevelUpRequirements",
    "ProgressionCharacter",
    "ValidationResult",
    "apply_level_up",
    "hp_increase",
    "level_up_requirements",
    "validate_level_up_choices",
]
