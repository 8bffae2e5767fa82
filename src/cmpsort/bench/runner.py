"""
Experiment runner: orchestrates a full benchmarking sweep from a YAML config.

Usage (from repo root):
    python -m cmpsort.bench.runner experiments/configs/01_random_scaling.yaml
    cmpsort-bench experiments/configs/02_tagged_stability.yaml

Outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - results.jsonl           # one JSON line per timing sample or status event
    - summary.csv             # median + IQR time and median comparisons per (algo, n)
    - (console) rich/tqdm summaries

Design notes:
- The ordering is named by `comparator` and resolved from the default
  comparator registry; every algorithm sorts with the same comparator.
- For each size n, we generate ONE dataset and give the same input to every algorithm.
- With `validate: true` (default), each algorithm's output is checked once per
  size against the stable oracle, outside the timed samples.
- On timeout/error/invalid output for an algorithm at size n, we skip larger
  sizes for that algo.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import importlib
import json
import os
import platform
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from cmpsort.bench.measure import time_sort_call
from cmpsort.datasets import make_dataset
from cmpsort.ordering import Comparator, default_registry
from cmpsort.validate import equals_oracle, first_order_violation_index, is_permutation

_console = Console()

REQUIRED_KEYS = [
    "experiment_name",
    "output_dir",
    "seed",
    "repeats",
    "warmup",
    "disable_gc",
    "timeout_seconds",
    "dataset",
    "sizes",
    "algorithms",
    "comparator",
]
SUMMARY_COLUMNS = [
    "algo",
    "n",
    "samples_ok",
    "median_ns",
    "iqr_ns",
    "min_ns",
    "max_ns",
    "median_comparisons",
]


# ------------------------- data structures ------------------------- #

@dataclass(frozen=True)
class AlgoSpec:
    name: str
    sort_fn: Any
    config: Dict[str, Any]


# ------------------------- helpers: IO & meta ------------------------- #

def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config must be a YAML mapping: {path}")
    return cfg


def _write_yaml(obj: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def _append_jsonl(obj: Dict[str, Any], path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
        f.write("\n")


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S")


def _ensure_run_dir(base_dir: Path, experiment_name: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / f"{_timestamp()}_{experiment_name}"
    run_dir.mkdir(parents=False, exist_ok=False)
    return run_dir


def _git_commit_short() -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode("utf-8").strip()


def _gather_meta() -> Dict[str, Any]:
    return {
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "psutil": psutil.__version__,
        "git_commit": _git_commit_short(),
        "machine": {
            "cpu": platform.processor() or platform.machine(),
            "cores_logical": psutil.cpu_count(logical=True),
            "cores_physical": psutil.cpu_count(logical=False),
            "ram_gb": round(psutil.virtual_memory().total / (1024**3), 2),
            "platform": platform.platform(),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
        "pid": os.getpid(),
        "cwd": str(Path.cwd()),
    }


def _resolve_algorithms(cfg_algos: List[Dict[str, Any]]) -> List[AlgoSpec]:
    specs: List[AlgoSpec] = []
    seen = set()
    for entry in cfg_algos:
        name = entry.get("name", None)
        if not name or not isinstance(name, str):
            raise ValueError("Each algorithm must have a string 'name' field")
        if name in seen:
            raise ValueError(f"Duplicate algorithm name in config: {name}")
        seen.add(name)

        try:
            mod = importlib.import_module(f"cmpsort.algorithms.{name}")
        except ImportError as e:
            raise ImportError(f"Could not import algorithm module 'cmpsort.algorithms.{name}': {e!r}") from e

        if not callable(getattr(mod, "sort", None)):
            raise AttributeError(f"Algorithm module '{name}' must define a callable `sort(a, *, cmp=None, config=None)`")

        config = entry.get("config", {})
        if config is None:
            config = {}
        elif not isinstance(config, dict):
            raise ValueError(f"Algorithm '{name}': 'config' must be a dict if provided")

        specs.append(AlgoSpec(name=name, sort_fn=mod.sort, config=config))
    return specs


def _resolve_comparator(name: Any) -> Comparator:
    if not isinstance(name, str):
        raise ValueError(f"Config 'comparator' must be a registry name string; got {name!r}")
    return default_registry().get(name)


def _validate_output(a_spec: AlgoSpec, a: List[Any], cmp: Comparator) -> Tuple[str, Optional[str]]:
    """Run the algorithm once (untimed) and check it against the oracle."""
    try:
        out = a_spec.sort_fn(list(a), cmp=cmp, config=a_spec.config)
    except Exception as e:
        return "error", f"validation run failed: {e!r}"
    if equals_oracle(a, out, cmp):
        return "ok", None
    i = first_order_violation_index(out, cmp)
    if i is not None:
        return "invalid", f"out of order at index {i}: {out[i]!r} > {out[i + 1]!r}"
    if not is_permutation(a, out):
        return "invalid", "output is not a permutation of the input"
    return "invalid", "equal elements out of input order (unstable)"


def _aggregate_summary(jsonl_path: Path) -> pd.DataFrame:
    if not jsonl_path.exists():
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = pd.read_json(jsonl_path, lines=True)
    if "time_ns" not in df.columns:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    # Status lines carry no time_ns
    df = df[df["time_ns"].notna()]
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    out = (
        df.groupby(["algo", "n"], as_index=False)
        .agg(
            samples_ok=("time_ns", "count"),
            median_ns=("time_ns", "median"),
            iqr_ns=("time_ns", lambda s: s.quantile(0.75) - s.quantile(0.25)),
            min_ns=("time_ns", "min"),
            max_ns=("time_ns", "max"),
            median_comparisons=("comparisons", "median"),
        )
    )
    out[["median_ns", "iqr_ns", "min_ns", "max_ns", "median_comparisons"]] = out[
        ["median_ns", "iqr_ns", "min_ns", "max_ns", "median_comparisons"]
    ].astype("int64")
    return out.sort_values(["algo", "n"], ignore_index=True)[SUMMARY_COLUMNS]


def _print_rich_summary(summary: pd.DataFrame, sizes: List[int]) -> None:
    table = Table(title="Benchmark Summary (median ± IQR in ms / median comparisons)")
    table.add_column("Algorithm", style="bold")
    picks = sorted({sizes[0], sizes[len(sizes) // 2], sizes[-1]})
    for npick in picks:
        table.add_column(f"n={npick}", justify="right")

    for algo in summary["algo"].unique():
        row = [f"[bold]{algo}[/]"]
        for npick in picks:
            s = summary[(summary["algo"] == algo) & (summary["n"] == npick)]
            if s.empty:
                row.append("—")
                continue
            median_ms = int(s["median_ns"].values[0]) / 1e6
            iqr_ms = int(s["iqr_ns"].values[0]) / 1e6
            comps = int(s["median_comparisons"].values[0])
            row.append(f"{median_ms:.2f} ± {iqr_ms:.2f} / {comps}")
        table.add_row(*row)
    _console.print()
    _console.print(table)
    _console.print()


# ------------------------- core runner ------------------------- #

def run_experiment(config_path: Path) -> Path:
    cfg = _load_yaml(config_path)

    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    experiment_name: str = str(cfg["experiment_name"])
    output_dir = Path(cfg["output_dir"])
    sizes: List[int] = [int(n) for n in cfg["sizes"] or []]
    repeats: int = int(cfg["repeats"])
    warmup: bool = bool(cfg["warmup"])
    disable_gc: bool = bool(cfg["disable_gc"])
    timeout_seconds: float = float(cfg["timeout_seconds"])
    dataset_spec: Dict[str, Any] = dict(cfg["dataset"])
    algos_cfg: List[Dict[str, Any]] = list(cfg["algorithms"])
    comparator_name = cfg["comparator"]
    validate: bool = bool(cfg.get("validate", True))

    if not sizes or any(n < 0 for n in sizes):
        raise ValueError("Config 'sizes' must be a non-empty list of nonnegative integers")

    # Resolve everything that can fail before creating the run directory.
    cmp = _resolve_comparator(comparator_name)
    algos: List[AlgoSpec] = _resolve_algorithms(algos_cfg)

    run_dir = _ensure_run_dir(output_dir, experiment_name)
    results_path = run_dir / "results.jsonl"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    cfg_resolved_path = run_dir / "config_resolved.yaml"

    _write_yaml(cfg, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    rng = np.random.default_rng(int(cfg["seed"]))

    # Per-algorithm skip flags (set on timeout/error/invalid)
    per_algo_skip = {a.name: False for a in algos}

    _console.print(f"[bold green]Run directory:[/bold green] {run_dir}")
    _console.print(f"[bold]Experiment:[/bold] {experiment_name}")
    _console.print(f"[bold]Comparator:[/bold] {comparator_name}")
    _console.print(f"[bold]Algorithms:[/bold] {', '.join(a.name for a in algos)}")
    _console.print()

    for n in tqdm(sizes, desc="Sizes", unit="n"):
        base_a = make_dataset(n, dataset_spec, rng)

        for a_spec in algos:
            if per_algo_skip[a_spec.name]:
                continue

            if validate:
                status, detail = _validate_output(a_spec, base_a, cmp)
                if status != "ok":
                    per_algo_skip[a_spec.name] = True
                    _append_jsonl(
                        {"algo": a_spec.name, "n": n, "status": status, "error": detail, "config": a_spec.config},
                        results_path,
                    )
                    _console.print(f"[bold red]{a_spec.name}[/] failed validation at n={n}: {detail}")
                    continue

            res = time_sort_call(
                algo_name=a_spec.name,
                algo_fn=a_spec.sort_fn,
                a=base_a,
                cmp=cmp,
                config=a_spec.config,
                repeats=repeats,
                warmup=warmup,
                disable_gc=disable_gc,
                timeout_seconds=timeout_seconds,
            )

            for trial_idx, (t_ns, comps) in enumerate(zip(res["samples_ns"], res["comparisons"])):
                _append_jsonl(
                    {
                        "algo": a_spec.name,
                        "n": n,
                        "dataset": dataset_spec,
                        "comparator": comparator_name,
                        "trial": trial_idx,
                        "time_ns": int(t_ns),
                        "comparisons": int(comps),
                        "config": a_spec.config,
                    },
                    results_path,
                )

            status = res["status"]
            if status == "timeout":
                per_algo_skip[a_spec.name] = True
                _append_jsonl(
                    {
                        "algo": a_spec.name,
                        "n": n,
                        "status": "timeout",
                        "timed_out_on_repeat": res["timed_out_on_repeat"],
                        "config": a_spec.config,
                    },
                    results_path,
                )
                _console.print(f"[yellow]{a_spec.name}[/] timed out at n={n}; skipping larger sizes")
            elif status == "error":
                per_algo_skip[a_spec.name] = True
                _append_jsonl(
                    {"algo": a_spec.name, "n": n, "status": "error", "error": res["error"], "config": a_spec.config},
                    results_path,
                )
                _console.print(f"[bold red]{a_spec.name}[/] errored at n={n}: {res['error']}")

    summary_df = _aggregate_summary(results_path)
    summary_df.to_csv(summary_path, index=False)

    _print_rich_summary(summary_df, sizes)

    _console.print("[bold green]Done.[/bold green] Wrote:")
    _console.print(f" - {results_path}")
    _console.print(f" - {summary_path}")
    _console.print(f" - {meta_path}")
    _console.print(f" - {cfg_resolved_path}")

    return run_dir


# ------------------------- CLI ------------------------- #

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a comparator-sort benchmark experiment from a YAML config.")
    p.add_argument("config", type=str, help="Path to YAML experiment config")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    config_path = Path(args.config).resolve()
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    try:
        run_experiment(config_path)
    except Exception as e:
        _console.print(f"[bold red]Runner failed:[/bold red] {e!r}")
        raise


if __name__ == "__main__":
    main()
