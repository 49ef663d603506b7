"""Environment exports."""

from .snake_env import SnakeEnv, SnakeEnvConfig, StepResult

__all__ = [
    "SnakeEnv",
    "SnakeEnvConfig",
    "StepResult",
]
