"""Central configuration for the team optimizer.

Game-balance tables used by the scoring model, plus search and progress settings.
"""

# Base score per champion rarity
CHAMPION_BASE_RARITY_SCORE = {
    "Epic": 100,
    "Legendary": 150,
    "Mythic": 220,
    "Limited Mythic": 260,
}

CHAMPION_RARITIES = list(CHAMPION_BASE_RARITY_SCORE)

# Gear slots every champion carries
GEAR_SLOTS = ["head", "arms", "legs", "chest", "waist"]

# Standard gear rarities, lowest to highest. "None" means the slot is empty.
STANDARD_GEAR_RARITIES = ["None", "Uncommon", "Rare", "Epic", "Legendary", "Mythic", "Mythic Enhanced"]

# Additive equipment multiplier per gear piece
STANDARD_GEAR_RARITY_MODIFIER = {
    "None": 0.0,
    "Uncommon": 0.02,
    "Rare": 0.05,
    "Epic": 0.10,
    "Legendary": 0.15,
    "Mythic": 0.20,
    "Mythic Enhanced": 0.25,
}

LEGACY_PIECE_RARITIES = ["None", "Epic", "Legendary", "Mythic", "Mythic+"]

LEGACY_PIECE_BASE_RARITY_MODIFIER = {
    "None": 0.0,
    "Epic": 0.10,
    "Legendary": 0.15,
    "Mythic": 0.20,
    "Mythic+": 0.25,
}

STAR_COLORS = ["White", "Blue", "Purple", "Gold", "Red"]
STARS_PER_COLOR = 5

# Ordered star-color tiers: Unlocked, White 1-Star ... Red 5-Star
STAR_COLOR_TIER_NAMES = ["Unlocked"] + [
    f"{color} {star}-Star" for color in STAR_COLORS for star in range(1, STARS_PER_COLOR + 1)
]

# Champion star tier -> multiplier on the rarity base score.
# Unlocked and White 1-Star are both neutral; each step after that adds 0.05.
STAR_COLOR_TIERS = {"Unlocked": 1.0}
STAR_COLOR_TIERS.update({
    name: round(1.0 + 0.05 * step, 2)
    for step, name in enumerate(STAR_COLOR_TIER_NAMES[1:])
})

# Legacy piece star tier -> additive multiplier, linear per star step
LEGACY_PIECE_MODIFIER_PER_STAR_INCREMENT = 0.0025
LEGACY_PIECE_STAR_TIER_MODIFIER = {"Unlocked": 0.0}
LEGACY_PIECE_STAR_TIER_MODIFIER.update({
    name: step * LEGACY_PIECE_MODIFIER_PER_STAR_INCREMENT
    for step, name in enumerate(STAR_COLOR_TIER_NAMES[1:], start=1)
})

# Force level (0-5) -> additive multiplier
FORCE_LEVEL_MODIFIER = {0: 0.0, 1: 0.10, 2: 0.20, 3: 0.30, 4: 0.40, 5: 0.50}
MAX_FORCE_LEVEL = 5

# Per inherent synergy tag on a champion
SYNERGY_COUNT_MODIFIER = 0.15

# Team-level bonuses
CLASS_DIVERSITY_MULTIPLIER = 1.15
CLASS_DIVERSITY_MIN_CLASSES = 4
SYNERGY_ACTIVATION_COUNT = 3
SYNERGY_DEPTH_BONUS = 450  # per member beyond a synergy's minimum activation count
INDIVIDUAL_SCORE_WEIGHT = 1.25  # weight of the base score sum when ranking teams

NO_CLASS = "N/A"
TEAM_SIZE = 5

# Search settings
SEARCH_TIME_SLICE = 0.016  # seconds of evaluation before yielding control

# Progress percentages reported to the caller
PROGRESS_GENERATING = 12
PROGRESS_GENERATED = 15
PROGRESS_EVALUATING = 20
PROGRESS_EVALUATION_SPAN = 75
PROGRESS_FINALIZING = 98
PROGRESS_DONE = 100

# Champion rarity upgrade path
UPGRADE_FROM_RARITY = "Legendary"
UPGRADE_TO_RARITY = "Mythic"
UPGRADE_STAR_COLOR_TIER = "Blue 5-Star"
