"""
Systems - The rules of the game, one module per concern.

Every public operation takes a Game, clones it, and returns a StepResult
carrying the new game, history entries, spawned interactions and any bonus
earned but not yet applied. Helpers documented as "in place" work on a game
the caller already cloned.

Systems never resolve bonuses themselves; actions and the interaction
resolver route them through the BonusResolver.
"""
