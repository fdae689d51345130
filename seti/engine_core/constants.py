"""
Game constants shared by every system.

Costs are expressed in the resource they consume; caps are inclusive.
"""

MAX_ROUNDS = 5
MIN_PLAYERS = 2
MAX_PLAYERS = 4

MAX_MEDIA_COVERAGE = 10
MAX_DATA = 6

MAX_PROBES_PER_SYSTEM = 1
MAX_PROBES_PER_SYSTEM_WITH_TECHNOLOGY = 2

PROBE_LAUNCH_COST = 2
ORBIT_COST_CREDITS = 1
ORBIT_COST_ENERGY = 1
LAND_COST_ENERGY = 3
MOVE_COST_ENERGY = 1
SCAN_COST_CREDITS = 1
SCAN_COST_ENERGY = 2
ANALYZE_COST_ENERGY = 1
TECH_RESEARCH_COST_MEDIA = 6
BUY_CARD_COST_MEDIA = 3
TRADE_COST = 2
HAND_SIZE_AFTER_PASS = 4

INITIAL_CREDITS = 4
INITIAL_ENERGY = 3
INITIAL_DATA = 0
INITIAL_HAND_SIZE = 5
INITIAL_MEDIA_COVERAGE = 4
INITIAL_REVENUE_CREDITS = 3
INITIAL_REVENUE_ENERGY = 2
INITIAL_REVENUE_CARDS = 1

CARD_ROW_SIZE = 3
ROUND_DECK_ROUNDS = 4
TECH_STACK_BONUS_PV = 2
SPECIES_DISCOVERY_TRACES = 3

GOLDEN_MILESTONES = (25, 50, 70)
NEUTRAL_MILESTONES = (20, 30)

ORBITER_REMOVAL_PV = 3

# Technology ids that change core rules
TECH_EXTRA_PROBE = "exploration-1"
TECH_ASTEROID = "exploration-2"
TECH_LAND_DISCOUNT = "exploration-3"
TECH_SATELLITES = "exploration-4"
TECH_OBS_ADJACENT = "observation-1"
TECH_OBS_MERCURY = "observation-2"
TECH_OBS_DISCARD = "observation-3"
TECH_OBS_PROBE = "observation-4"
