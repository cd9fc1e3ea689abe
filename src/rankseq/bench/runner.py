"""
Experiment runner: builds ranked sequences under several variants from a YAML
config, checks every build against the oracle, and times it.

Usage (from repo root):
    python -m rankseq.bench.runner experiments/configs/01_random_scaling.yaml
    rankseq-bench experiments/configs/02_records_strategies.yaml --verbose

Outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - results.jsonl           # one JSON line per successful timing sample
    - summary.csv             # median + IQR per (variant, n), comparisons, validity
    - (console) rich/tqdm summaries

Config schema:
    experiment_name: str
    output_dir: path
    seed: int
    repeats: int
    warmup: bool
    disable_gc: bool
    timeout_seconds: float
    dataset: {dist, params, [fields]}   # with "fields" -> dict records
    sizes: [int, ...]
    variants:
      - name: str                       # unique
        strategy: {kind, ...}           # see rankseq.ordering.strategies
        insertion: linear | bisect      # optional, default linear
        ties: newest_first | oldest_first   # optional, default newest_first

Design notes:
- For each size n, we generate ONE input and give it to every variant.
- Each (variant, n) is checked against the oracle once; the verdict and the
  comparison count of the last build are written on every sample line.
- On timeout/error for a variant at size n, we skip larger sizes for it.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import json
import logging
import os
import platform
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

from rankseq.bench.measure import time_build_call
from rankseq.datasets import make_dataset, make_records
from rankseq.ordering import Comparator, counting, strategy_from_spec
from rankseq.sequence import InsertMode, RankedSequence, TiePolicy
from rankseq.validate import (
    ORACLE_NAME,
    equals_oracle,
    first_order_violation_index,
    permutation_counter_diff,
)

logger = logging.getLogger(__name__)

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
    "variants",
]

SUMMARY_COLUMNS = [
    "variant",
    "n",
    "samples_ok",
    "median_ns",
    "iqr_ns",
    "min_ns",
    "max_ns",
    "comparisons",
    "valid",
]


# ------------------------- data structures ------------------------- #

@dataclass(frozen=True)
class VariantSpec:
    name: str
    compare: Comparator
    insertion: InsertMode
    ties: TiePolicy
    config: Dict[str, Any]

    def build(self, items: Sequence[Any]) -> RankedSequence:
        """Build a fresh sequence; its comparator counts the calls it receives."""
        seq: RankedSequence = RankedSequence(
            counting(self.compare), ties=self.ties, insertion=self.insertion
        )
        seq.extend(items)
        return seq


# ------------------------- helpers: IO & meta ------------------------- #

def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {path} must be a YAML mapping")
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
    suffix = 1
    while run_dir.exists():
        run_dir = base_dir / f"{_timestamp()}_{experiment_name}_{suffix}"
        suffix += 1
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
        "oracle": ORACLE_NAME,
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


# ------------------------- helpers: config ------------------------- #

def _resolve_variants(cfg_variants: List[Dict[str, Any]]) -> List[VariantSpec]:
    if not cfg_variants:
        raise ValueError("Config 'variants' must be a non-empty list")
    specs: List[VariantSpec] = []
    seen = set()
    for entry in cfg_variants:
        if not isinstance(entry, dict):
            raise ValueError(f"Each variant must be a mapping; got {entry!r}")
        name = entry.get("name", None)
        if not name or not isinstance(name, str):
            raise ValueError("Each variant must have a string 'name' field")
        if name in seen:
            raise ValueError(f"Duplicate variant name in config: {name}")
        seen.add(name)

        if "strategy" not in entry:
            raise ValueError(f"Variant '{name}': missing 'strategy'")
        try:
            compare = strategy_from_spec(entry["strategy"])
            insertion = InsertMode(entry.get("insertion", InsertMode.LINEAR.value))
            ties = TiePolicy(entry.get("ties", TiePolicy.NEWEST_FIRST.value))
        except ValueError as e:
            raise ValueError(f"Variant '{name}': {e}") from e

        specs.append(
            VariantSpec(name=name, compare=compare, insertion=insertion, ties=ties, config=dict(entry))
        )
    return specs


def _resolve_sizes(raw: Any) -> List[int]:
    if not isinstance(raw, list) or not raw:
        raise ValueError("Config 'sizes' must be a non-empty list of nonnegative integers")
    sizes: List[int] = []
    for n in raw:
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise ValueError(f"Config 'sizes' entries must be nonnegative integers; got {n!r}")
        sizes.append(n)
    return sizes


def _make_items(n: int, dataset_spec: Dict[str, Any], rng: np.random.Generator) -> List[Any]:
    if "fields" in dataset_spec:
        return make_records(n, dataset_spec, rng)
    return make_dataset(n, dataset_spec, rng)


# ------------------------- helpers: summary ------------------------- #

def _iqr(s: pd.Series) -> float:
    return s.quantile(0.75) - s.quantile(0.25)


def _aggregate_summary(jsonl_path: Path) -> pd.DataFrame:
    empty = pd.DataFrame(columns=SUMMARY_COLUMNS)
    if not jsonl_path.exists():
        return empty
    df = pd.read_json(jsonl_path, lines=True)
    if df.empty or "time_ns" not in df.columns:
        return empty
    # Status lines carry no time_ns
    df = df[df["time_ns"].notna()].copy()
    if df.empty:
        return empty
    df["valid"] = df["valid"].astype(bool)

    out = (
        df.groupby(["variant", "n"], as_index=False)
        .agg(
            samples_ok=("time_ns", "count"),
            median_ns=("time_ns", "median"),
            iqr_ns=("time_ns", _iqr),
            min_ns=("time_ns", "min"),
            max_ns=("time_ns", "max"),
            comparisons=("comparisons", "max"),
            valid=("valid", "all"),
        )
    )
    int_cols = ["n", "median_ns", "iqr_ns", "min_ns", "max_ns", "comparisons"]
    out[int_cols] = out[int_cols].astype("int64")
    return out[SUMMARY_COLUMNS].sort_values(["variant", "n"], ignore_index=True)


def _print_rich_summary(summary: pd.DataFrame, sizes: List[int]) -> None:
    table = Table(title="Ranked Sequence Summary (median ± IQR in ms, comparisons)")
    table.add_column("Variant", style="bold")
    picks: List[Tuple[str, int]] = []
    if sizes:
        first, mid, last = sizes[0], sizes[len(sizes) // 2], sizes[-1]
        picks = [(f"n={n}", n) for n in dict.fromkeys([first, mid, last])]
    for hdr, _ in picks:
        table.add_column(hdr, justify="right")
    table.add_column("valid", justify="center")

    def _format_cell(row: pd.Series) -> str:
        median_ms = row["median_ns"] / 1e6
        iqr_ms = row["iqr_ns"] / 1e6
        return f"{median_ms:.2f} ± {iqr_ms:.2f} ({int(row['comparisons'])})"

    for variant in summary["variant"].unique():
        s_var = summary[summary["variant"] == variant]
        cells = [variant]
        for _, npick in picks:
            s = s_var[s_var["n"] == npick]
            cells.append("—" if s.empty else _format_cell(s.iloc[0]))
        cells.append("[green]yes[/]" if bool(s_var["valid"].all()) else "[red]NO[/]")
        table.add_row(*cells)

    _console.print()
    _console.print(table)
    _console.print()


# ------------------------- core runner ------------------------- #

def _hashable(item: Any) -> Any:
    # Records are dicts; count them by their (field, value) pairs.
    if isinstance(item, Mapping):
        return tuple(item.items())
    return item


def _check_build(variant: VariantSpec, items: Sequence[Any], seq: Iterable[Any]) -> bool:
    out = list(seq)
    if equals_oracle(items, out, variant.compare, variant.ties):
        return True
    diff = permutation_counter_diff([_hashable(x) for x in items], [_hashable(x) for x in out])
    if diff:
        lost = {k: d for k, d in diff.items() if d > 0}
        extra = {k: -d for k, d in diff.items() if d < 0}
        logger.error(
            "%s: n=%d build lost %s and duplicated %s", variant.name, len(items), lost, extra
        )
        return False
    i = first_order_violation_index(out, variant.compare)
    if i is None:
        logger.error("%s: n=%d differs from the oracle in tie placement", variant.name, len(items))
    else:
        logger.error("%s: n=%d out of order at rank %d", variant.name, len(items), i)
    return False


def run_experiment(config_path: Path) -> Path:
    cfg = _load_yaml(config_path)

    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    experiment_name = str(cfg["experiment_name"])
    output_dir = Path(cfg["output_dir"])
    sizes = _resolve_sizes(cfg["sizes"])
    repeats = int(cfg["repeats"])
    warmup = bool(cfg["warmup"])
    disable_gc = bool(cfg["disable_gc"])
    timeout_seconds = float(cfg["timeout_seconds"])
    if not isinstance(cfg["dataset"], dict):
        raise ValueError("Config 'dataset' must be a mapping")
    dataset_spec: Dict[str, Any] = dict(cfg["dataset"])
    variants = _resolve_variants(list(cfg["variants"] or []))

    run_dir = _ensure_run_dir(output_dir, experiment_name)
    results_path = run_dir / "results.jsonl"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    cfg_resolved_path = run_dir / "config_resolved.yaml"

    _write_yaml(cfg, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    rng = np.random.default_rng(int(cfg["seed"]))
    skipped = {v.name: False for v in variants}

    _console.print(f"[bold green]Run directory:[/bold green] {run_dir}")
    _console.print(f"[bold]Experiment:[/bold] {experiment_name}")
    _console.print(f"[bold]Variants:[/bold] {', '.join(v.name for v in variants)}")
    _console.print()

    for n in tqdm(sizes, desc="Sizes", unit="n"):
        items = _make_items(n, dataset_spec, rng)
        logger.debug("n=%d: generated %d items", n, len(items))

        for variant in variants:
            if skipped[variant.name]:
                continue

            res = time_build_call(
                variant_name=variant.name,
                build_fn=variant.build,
                items=items,
                repeats=repeats,
                warmup=warmup,
                disable_gc=disable_gc,
                timeout_seconds=timeout_seconds,
            )

            seq = res["last_output"]
            valid = seq is not None and _check_build(variant, items, seq)
            comparisons = seq.compare.calls if seq is not None else None

            for trial_idx, t_ns in enumerate(res["samples_ns"]):
                _append_jsonl(
                    {
                        "variant": variant.name,
                        "n": n,
                        "insertion": variant.insertion.value,
                        "ties": variant.ties.value,
                        "dataset": dataset_spec,
                        "trial": trial_idx,
                        "time_ns": int(t_ns),
                        "comparisons": comparisons,
                        "valid": valid,
                    },
                    results_path,
                )

            status = res["status"]
            if status in ("timeout", "error"):
                skipped[variant.name] = True
                logger.warning("%s: %s at n=%d; skipping larger sizes", variant.name, status, n)
                _append_jsonl(
                    {
                        "variant": variant.name,
                        "n": n,
                        "status": status,
                        "timed_out_on_repeat": res["timed_out_on_repeat"],
                        "error": res["error"],
                        "config": variant.config,
                    },
                    results_path,
                )

    summary_df = _aggregate_summary(results_path)
    summary_df.to_csv(summary_path, index=False)
    _print_rich_summary(summary_df, sizes)

    _console.print("[bold green]Done.[/bold green] Wrote:")
    for path in (results_path, summary_path, meta_path, cfg_resolved_path):
        _console.print(f" - {path}")

    return run_dir


# ------------------------- CLI ------------------------- #

def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_console, rich_tracebacks=True)],
    )


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Build, validate and time ranked sequences from a YAML config.")
    p.add_argument("config", type=str, help="Path to YAML experiment config")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    _configure_logging(args.verbose)
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
