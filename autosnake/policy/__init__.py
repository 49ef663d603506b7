"""Policy exports."""

from .astar import AStarConfig, AStarPlanner, SearchContext, path_directions
from .controller import Controller, ControllerConfig, ControllerState
from .hamiltonian import (
    HamiltonianTour,
    boustrophedon_cycle,
    is_hamiltonian_cycle,
    maze_cycle,
    validate_tour,
)
from .survival import choose_survival_move, safe_directions

__all__ = [
    "AStarConfig",
    "AStarPlanner",
    "SearchContext",
    "path_directions",
    "Controller",
    "ControllerConfig",
    "ControllerState",
    "HamiltonianTour",
    "boustrophedon_cycle",
    "is_hamiltonian_cycle",
    "maze_cycle",
    "validate_tour",
    "choose_survival_move",
    "safe_directions",
]
