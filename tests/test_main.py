import pytest

from autosnake.main import _seed_override, build_controller, build_env, load_config, main, run_episode


def _cfg(strategy, width=6, height=6, **controller):
    return {
        "env": {"width": width, "height": height, "initial_length": 3},
        "controller": {"strategy": strategy, **controller},
    }


def test_hamiltonian_strategy_fills_small_board():
    cfg = _cfg("hamiltonian", width=4, height=4)
    env = build_env(cfg, seed=1)
    controller = build_controller(cfg, env, seed=1)
    result = run_episode(env, controller, max_steps=2000)
    assert result.reason == "won"
    assert result.length == 16
    assert result.score == 13


def test_maze_tour_also_fills_board():
    cfg = _cfg("hamiltonian", width=6, height=6, tour="maze")
    env = build_env(cfg, seed=4)
    controller = build_controller(cfg, env, seed=4)
    result = run_episode(env, controller, max_steps=5000)
    assert result.reason == "won"


def test_astar_strategy_eats_first_food():
    cfg = _cfg("astar", width=10, height=10)
    env = build_env(cfg, seed=3)
    controller = build_controller(cfg, env, seed=3)
    result = run_episode(env, controller, max_steps=200)
    assert result.score >= 1
    assert result.steps <= 200


def test_step_budget_cuts_episode():
    cfg = _cfg("hamiltonian", width=8, height=8)
    env = build_env(cfg, seed=0)
    controller = build_controller(cfg, env, strategy="hamiltonian", seed=0)
    result = run_episode(env, controller, max_steps=5)
    assert result.reason == "max_steps"
    assert result.steps == 5


def test_missing_config_falls_back_to_defaults(tmp_path):
    assert load_config(tmp_path / "absent.yaml") == {}
    path = tmp_path / "cfg.yaml"
    path.write_text("env:\n  width: 4\n  height: 4\nrun:\n  episodes: 1\n", encoding="utf-8")
    assert load_config(path)["env"]["width"] == 4


def test_main_runs_episodes_from_config(tmp_path, caplog):
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "seed: 2\nenv:\n  width: 4\n  height: 4\ncontroller:\n  strategy: hamiltonian\nrun:\n  episodes: 2\n  max_steps: 500\n",
        encoding="utf-8",
    )
    with caplog.at_level("INFO", logger="autosnake"):
        main(["--config", str(path)])
    assert "2 won" in caplog.text


def test_hamiltonian_run_accepts_snake_longer_than_a_row():
    cfg = _cfg("hamiltonian", width=4, height=4)
    cfg["env"]["initial_length"] = 6
    env = build_env(cfg, seed=1)
    controller = build_controller(cfg, env, seed=1)
    result = run_episode(env, controller, max_steps=2000)
    assert result.reason == "won"
    assert result.score == 10


def test_render_logs_frames_at_debug(tmp_path, caplog):
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "env:\n  width: 4\n  height: 4\ncontroller:\n  strategy: hamiltonian\nrun:\n  episodes: 1\n  max_steps: 3\n",
        encoding="utf-8",
    )
    with caplog.at_level("DEBUG", logger="autosnake"):
        main(["--config", str(path), "--render", "--log-level", "DEBUG"])
    frames = [r.getMessage() for r in caplog.records if r.getMessage().startswith("step=")]
    assert len(frames) == 3
    assert frames[0].startswith("step=0 move=RIGHT\n")
    assert "@" in frames[0]


def test_seed_env_var_overrides_config(tmp_path, monkeypatch, caplog):
    monkeypatch.setenv("AUTOSNAKE_SEED", "5")
    assert _seed_override({"seed": 2}) == 5
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "seed: 2\nenv:\n  width: 4\n  height: 4\ncontroller:\n  strategy: hamiltonian\nrun:\n  episodes: 1\n  max_steps: 10\n",
        encoding="utf-8",
    )
    with caplog.at_level("INFO", logger="autosnake"):
        main(["--config", str(path)])
    assert "Seeding RNGs with 5" in caplog.text
    monkeypatch.delenv("AUTOSNAKE_SEED")
    assert _seed_override({"seed": 2}) == 2


def test_non_integer_seed_env_var_names_the_variable(monkeypatch):
    monkeypatch.setenv("AUTOSNAKE_SEED", "abc")
    with pytest.raises(ValueError, match="AUTOSNAKE_SEED"):
        _seed_override({})
