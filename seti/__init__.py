"""
SETI Engine - Rules engine for a SETI-style space exploration board game.

A deterministic, turn-serialized engine that owns the authoritative game state
and provides:
- Action validation and execution (launch, orbit, land, scan, analyze, ...)
- Bonus resolution into resource deltas and pending interactions
- An interaction queue for nested mid-turn choices
- Single-step undo through a snapshot ledger
- Card-text parsing into structured effects
"""

__version__ = "0.1.0"
