"""Parameter optimization - adaptive local search and scoring."""

from .objective import (
    ObjectiveFunc,
    composite_objective,
    make_objective,
)
from .search import (
    AdaptiveLocalSearch,
    SearchResult,
    SearchState,
    adaptive_search,
    optimize,
)
