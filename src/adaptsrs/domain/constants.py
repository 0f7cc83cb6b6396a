"""Centralized constants for the adaptsrs engine.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Forgetting model ----------
RETRIEVABILITY_ANCHOR = 0.9  # Retrievability after one stability unit
SHORT_TERM_HALF_LIFE_MINUTES = 20.0
SHORT_TERM_GRACE_MINUTES = 1.0

# ---------- Difficulty ----------
DIFFICULTY_MIN = 0.1
DIFFICULTY_MAX = 1.0
DEFAULT_DIFFICULTY = 0.3
DEFAULT_COMPLEXITY = 1.0
DIFFICULTY_DRIFT = 0.01
HESITATION_SECONDS = 15.0
HESITATION_PENALTY = 0.15

# ---------- Stability / stages ----------
BASE_MULTIPLIER = 2.5
DIFFICULTY_WEIGHT = 1.5
MIN_GROWTH_MULTIPLIER = 1.1
LAPSE_RETENTION = 0.7
MIN_LAPSE_STABILITY = 1.0
FIXATION_STABILITY_GOOD = 1.0
FIXATION_STABILITY_EASY = 4.0
RETENTION_THRESHOLD_DAYS = 60.0
CONSOLIDATION_THRESHOLD_DAYS = 14.0
FIXATION_THRESHOLD_DAYS = 3.0

# ---------- Fatigue ----------
FATIGUE_THRESHOLD = 0.7
FATIGUE_IMPACT = 0.3
FATIGUE_COST_AGAIN = 0.05
FATIGUE_COST_HARD = 0.03
FATIGUE_COST_DEFAULT = 0.01

# ---------- Scheduling ----------
DEFAULT_MAX_RISK = 0.10
ACQUISITION_AGAIN_MINUTES = 1
ACQUISITION_HARD_MINUTES = 6
ACQUISITION_BASE_MINUTES = 10

# ---------- Sessions ----------
DEFAULT_SESSION_LIMIT = 50
NEW_CARD_PRIORITY = 2.0
FOCUS_NEW_CARD_PRIORITY = 1.0
OVERDUE_BOOST = 0.5
IMMINENT_FORGETTING_RISK = 0.4

# ---------- Deck health ----------
CRITICAL_RISK = 0.30
HEALTHY_SCORE = 80
ATTENTION_SCORE = 50

# ---------- Import / export ----------
DEFAULT_IMPORT_DECK = "Imported"
DECK_PATH_SEPARATOR = "::"
RETENTION_IMPORT_INTERVAL_DAYS = 21
ANKI_IMPORT_TAG = "anki_import"
