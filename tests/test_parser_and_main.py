"""Tests for config loading, the command-line entry point and chart output.

Config files are written under pytest's ``tmp_path``.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskorder.evaluation import build_schedule
from taskorder.main import DEMO_TASKS, DEMO_WORKERS, cli, run
from taskorder.models import Task
from taskorder.parser import SearchConfig, load_config, load_search_config, parse_tasks
from taskorder.search import find_optimal_order
from taskorder.visualization import next_unique_path, save_convergence_plot, save_gantt_chart

YAML_CONFIG = """\
log_level: WARNING
workers: 2
model: worker_pool
tasks:
  - {duration: 2, depends: []}
  - {duration: 3, depends: [0]}
  - {duration: 1}
"""


def test_load_yaml_config(tmp_path: Path):
    path = tmp_path / "cfg.yaml"
    path.write_text(YAML_CONFIG)
    cfg = load_search_config(str(path))
    assert cfg.workers == 2
    assert cfg.model == "worker_pool"
    assert cfg.log_level == "WARNING"
    assert cfg.tasks == [Task(2), Task(3, depends=[0]), Task(1)]
    assert cfg.charts_dir is None and cfg.time_limit_ms is None


def test_load_json_config(tmp_path: Path):
    path = tmp_path / "cfg.json"
    path.write_text(
        json.dumps(
            {"workers": 1, "time_limit_ms": 500, "tasks": [{"duration": 4, "depends": []}]}
        )
    )
    cfg = load_search_config(str(path))
    assert cfg.tasks == [Task(4)]
    assert cfg.time_limit_ms == 500
    assert cfg.model == "index_offset"


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.yaml"))


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",  # root is not a mapping
        "tasks: {duration: 1}\n",  # tasks is not a list
        "tasks:\n  - {depends: [0]}\n",  # missing duration
        "workers: many\n",  # non-numeric worker count
        "workers: 2.7\n",  # fractional worker count
        "workers: true\n",  # boolean worker count
        "time_limit_ms: fast\n",  # non-numeric time limit
        "tasks:\n  - {duration: 1}\n  - {duration: 2, depends: 0}\n",  # scalar depends
        "tasks:\n  - {duration: 1}\n  - {duration: 2, depends: 1}\n",  # scalar depends
    ],
)
def test_bad_config_rejected(tmp_path: Path, content: str):
    path = tmp_path / "bad.yaml"
    path.write_text(content)
    with pytest.raises(ValueError):
        load_search_config(str(path))


def test_parse_tasks_empty():
    assert parse_tasks(None) == []


def test_run_falls_back_to_demo(capsys):
    order = run(SearchConfig())
    assert order == find_optimal_order(DEMO_TASKS, DEMO_WORKERS)
    assert "Optimal order:" in capsys.readouterr().out


def test_cli_with_config_and_charts(tmp_path: Path, capsys):
    charts = tmp_path / "charts"
    path = tmp_path / "cfg.yaml"
    path.write_text(YAML_CONFIG + f"charts:\n  dir: {charts}\n")
    assert cli(["--config", str(path)]) == 0
    out = capsys.readouterr().out
    assert "Optimal order:" in out and "Finish time:" in out
    assert (charts / "gantt_worker_pool.png").exists()
    assert (charts / "convergence.png").exists()


def test_cli_cycle_reports_no_solution(tmp_path: Path, capsys):
    path = tmp_path / "cycle.yaml"
    path.write_text("tasks:\n  - {duration: 1, depends: [1]}\n  - {duration: 1, depends: [0]}\n")
    assert cli(["--config", str(path)]) == 1
    assert "No valid ordering exists" in capsys.readouterr().out


def test_cli_unknown_explicit_config(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        cli(["--config", str(tmp_path / "nope.yaml")])


def test_gantt_for_both_models(tmp_path: Path, demo_tasks):
    order = find_optimal_order(demo_tasks, 3)
    for model in ("index_offset", "worker_pool"):
        sched = build_schedule(order, demo_tasks, 3, model)
        out = save_gantt_chart(sched, str(tmp_path / f"{model}.png"))
        assert Path(out).exists()


def test_convergence_plot_and_unique_path(tmp_path: Path):
    target = tmp_path / "conv.png"
    save_convergence_plot([(1, 10), (5, 8)], str(target))
    assert target.exists()
    assert next_unique_path(target) == str(tmp_path / "conv_1.png")


def test_depends_null_means_no_dependencies():
    assert parse_tasks([{"duration": 2, "depends": None}]) == [Task(2)]


def test_cli_invalid_task_list_exits_with_error(tmp_path: Path, capsys):
    path = tmp_path / "bad_index.yaml"
    path.write_text("tasks:\n  - {duration: 1, depends: [4]}\n")
    assert cli(["--config", str(path)]) == 1
    assert "Invalid task list" in capsys.readouterr().out


def test_run_time_limit_is_not_reported_as_no_solution(demo_tasks, capsys):
    assert run(SearchConfig(tasks=demo_tasks, workers=3, time_limit_ms=0)) is None
    out = capsys.readouterr().out
    assert "Time limit reached" in out
    assert "No valid ordering exists" not in out
