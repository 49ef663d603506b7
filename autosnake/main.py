"""Entry-point for headless planning runs."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

import yaml
from dotenv import load_dotenv

from autosnake.env import SnakeEnv, SnakeEnvConfig
from autosnake.policy import Controller, ControllerConfig
from autosnake.types import EpisodeResult
from autosnake.utils.maps import ascii_grid_map

LOGGER = logging.getLogger("autosnake")

DEFAULT_CONFIG = Path("configs/default.yaml")


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Autonomous snake planner")
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help="Path to YAML config",
    )
    parser.add_argument(
        "--episodes",
        type=int,
        default=None,
        help="Number of games to play (overrides config)",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Step budget per game before it is cut off (overrides config)",
    )
    parser.add_argument(
        "--strategy",
        choices=("astar", "hamiltonian"),
        default=None,
        help="Override controller strategy from config",
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Log an ASCII frame every tick at DEBUG level",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Python logging level",
    )
    return parser.parse_args(argv)


def load_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        LOGGER.warning("Config %s not found; using defaults", path)
        return {}
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _seed_override(cfg: dict[str, Any]) -> Optional[int]:
    raw = os.getenv("AUTOSNAKE_SEED")
    if raw:
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"AUTOSNAKE_SEED must be an integer, got {raw!r}") from exc
    seed = cfg.get("seed")
    return int(seed) if seed is not None else None


def build_env(cfg: dict[str, Any], seed: Optional[int] = None) -> SnakeEnv:
    env_cfg = cfg.get("env", {})
    config = SnakeEnvConfig(
        width=int(env_cfg.get("width", 16)),
        height=int(env_cfg.get("height", 16)),
        initial_length=int(env_cfg.get("initial_length", 3)),
        wrap=bool(env_cfg.get("wrap", False)),
        seed=seed,
    )
    return SnakeEnv(config)


def build_controller(
    cfg: dict[str, Any],
    env: SnakeEnv,
    strategy: Optional[str] = None,
    seed: Optional[int] = None,
) -> Controller:
    ctl_cfg = cfg.get("controller", {})
    config = ControllerConfig(
        strategy=strategy or ctl_cfg.get("strategy", "astar"),
        fallback=ctl_cfg.get("fallback", "space"),
        replan_interval=int(ctl_cfg.get("replan_interval", 5)),
        frontier=ctl_cfg.get("frontier", "heap"),
        tour=ctl_cfg.get("tour", "boustrophedon"),
        seed=seed,
    )
    return Controller(env.grid, config)


def run_episode(
    env: SnakeEnv,
    controller: Controller,
    max_steps: int = 0,
    render: bool = False,
) -> EpisodeResult:
    """Play one game to completion or until ``max_steps`` (0 = unbounded)."""
    length = env.config.initial_length
    if controller.tour is not None:
        # Lay the body along the tour so the head sits at tour[length - 1].
        env.reset(body=list(reversed(controller.tour.cells[:length])))
    else:
        env.reset()
    controller.reset(length)

    while not env.done:
        if max_steps and env.step_idx >= max_steps:
            env.end("max_steps")
            break
        direction = controller.next_direction(env)
        if render and LOGGER.isEnabledFor(logging.DEBUG):
            frame = ascii_grid_map(env.grid, list(env.body), env.food, controller.path_cells())
            LOGGER.debug("step=%d move=%s\n%s", env.step_idx, direction.name, frame)
        env.step(direction)

    return EpisodeResult(
        score=env.score,
        steps=env.step_idx,
        length=len(env.body),
        reason=env.reason or "max_steps",
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    load_dotenv()
    cfg = load_config(args.config)
    run_cfg = cfg.get("run", {})
    episodes = args.episodes if args.episodes is not None else int(run_cfg.get("episodes", 1))
    max_steps = args.max_steps if args.max_steps is not None else int(run_cfg.get("max_steps", 0))
    seed = _seed_override(cfg)
    if seed is not None:
        LOGGER.info("Seeding RNGs with %s", seed)

    env = build_env(cfg, seed)
    controller = build_controller(cfg, env, args.strategy, seed)
    LOGGER.info(
        "Playing %d episode(s) on %dx%d with strategy=%s",
        episodes,
        env.grid.width,
        env.grid.height,
        controller.config.strategy,
    )
    results: List[EpisodeResult] = []
    for episode in range(episodes):
        result = run_episode(env, controller, max_steps=max_steps, render=args.render)
        results.append(result)
        LOGGER.info(
            "Episode %d: score=%d length=%d steps=%d end=%s",
            episode,
            result.score,
            result.length,
            result.steps,
            result.reason,
        )
    if results:
        mean_score = sum(r.score for r in results) / len(results)
        wins = sum(1 for r in results if r.reason == "won")
        LOGGER.info("Mean score %.2f over %d episode(s); %d won", mean_score, len(results), wins)


if __name__ == "__main__":
    main()
