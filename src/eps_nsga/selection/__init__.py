"""Parent selection strategies."""

from eps_nsga.registry import SelectionRegistry
from eps_nsga.selection.pooled import PooledTournament
from eps_nsga.selection.tournament import crowded_tournament
from eps_nsga.selection.uniform import random_selection

# Register built-in selection strategies
SelectionRegistry.register("tournament", crowded_tournament)
SelectionRegistry.register("random", random_selection)

__all__ = ["PooledTournament", "crowded_tournament", "random_selection"]
