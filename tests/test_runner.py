"""
End-to-end tests for the YAML experiment runner (small sizes, temp output dir).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pandas as pd
import pytest
import yaml

from cmpsort.bench import runner


def _write_config(tmp_path: Path, **overrides: Any) -> Path:
    cfg: Dict[str, Any] = {
        "experiment_name": "smoke",
        "output_dir": str(tmp_path / "results"),
        "seed": 11,
        "repeats": 2,
        "warmup": False,
        "disable_gc": False,
        "timeout_seconds": 30.0,
        "comparator": "first",
        "dataset": {"dist": "few_uniques", "elements": "tagged", "params": {"k": 3, "range": [0, 9]}},
        "sizes": [0, 10, 50],
        "algorithms": [{"name": "merge_sort"}, {"name": "builtin_timsort"}],
    }
    cfg.update(overrides)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    return path


def _read_jsonl(path: Path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_run_writes_all_outputs(tmp_path: Path) -> None:
    run_dir = runner.run_experiment(_write_config(tmp_path))

    for name in ("config_resolved.yaml", "meta.json", "results.jsonl", "summary.csv"):
        assert (run_dir / name).exists(), name

    meta = json.loads((run_dir / "meta.json").read_text(encoding="utf-8"))
    assert {"python", "numpy", "pandas", "machine"} <= set(meta)

    rows = _read_jsonl(run_dir / "results.jsonl")
    assert all("status" not in r for r in rows)
    assert {r["algo"] for r in rows} == {"merge_sort", "builtin_timsort"}
    assert len(rows) == 2 * 3 * 2  # algos * sizes * repeats

    summary = pd.read_csv(run_dir / "summary.csv")
    assert list(summary.columns) == runner.SUMMARY_COLUMNS
    assert len(summary) == 6
    assert (summary["samples_ok"] == 2).all()
    zero = summary[summary["n"] == 0]
    assert (zero["median_comparisons"] == 0).all()


def test_invalid_algorithm_is_skipped_after_failed_validation(tmp_path: Path, monkeypatch) -> None:
    import cmpsort.algorithms.builtin_timsort as reference

    stable_sort = reference.sort

    def unstable(a, *, cmp=None, config=None):
        # Reverses ties: sorted, then equal runs flipped.
        out = stable_sort(a, cmp=cmp, config=config)
        return sorted(out, key=lambda p: (p[0], -p[1]))

    monkeypatch.setattr(reference, "sort", unstable)
    run_dir = runner.run_experiment(_write_config(tmp_path, sizes=[50, 100]))

    rows = _read_jsonl(run_dir / "results.jsonl")
    invalid = [r for r in rows if r.get("status") == "invalid"]
    assert len(invalid) == 1
    assert invalid[0]["algo"] == "builtin_timsort"
    assert invalid[0]["n"] == 50
    assert "unstable" in invalid[0]["error"]
    assert all(r["algo"] == "merge_sort" for r in rows if "time_ns" in r)


def test_validation_can_be_disabled(tmp_path: Path) -> None:
    run_dir = runner.run_experiment(_write_config(tmp_path, validate=False, sizes=[5]))
    rows = _read_jsonl(run_dir / "results.jsonl")
    assert len(rows) == 4


def test_algorithm_errors_are_recorded(tmp_path: Path) -> None:
    cfg = _write_config(
        tmp_path,
        validate=False,
        algorithms=[{"name": "merge_sort", "config": {"cutoff": 8}}],
    )
    run_dir = runner.run_experiment(cfg)
    rows = _read_jsonl(run_dir / "results.jsonl")
    assert len(rows) == 1
    assert rows[0]["status"] == "error"
    summary = pd.read_csv(run_dir / "summary.csv")
    assert summary.empty


@pytest.mark.parametrize(
    "overrides, exc",
    [
        ({"comparator": "sideways"}, KeyError),
        ({"comparator": 3}, ValueError),
        ({"sizes": []}, ValueError),
        ({"algorithms": [{"name": "bogosort"}]}, ImportError),
        ({"algorithms": [{"name": "merge_sort"}, {"name": "merge_sort"}]}, ValueError),
        ({"algorithms": [{"name": "merge_sort", "config": [1]}]}, ValueError),
    ],
)
def test_config_errors(tmp_path: Path, overrides, exc) -> None:
    with pytest.raises(exc):
        runner.run_experiment(_write_config(tmp_path, **overrides))
    assert not (tmp_path / "results").exists()


def test_missing_keys(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"experiment_name": "x"}), encoding="utf-8")
    with pytest.raises(ValueError, match="Missing required config keys"):
        runner.run_experiment(path)


def test_main_cli(tmp_path: Path) -> None:
    runner.main([str(_write_config(tmp_path, sizes=[4]))])
    assert len(list((tmp_path / "results").iterdir())) == 1

    with pytest.raises(SystemExit):
        runner.main([str(tmp_path / "missing.yaml")])
