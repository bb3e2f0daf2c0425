#!/usr/bin/env python3
"""Quick perf benchmark for manifest parsing."""

from __future__ import annotations

import argparse
import cProfile
import io
from pathlib import Path
import pstats
import statistics
import time

from tqdm import tqdm

from puppetpy.parser import parse


def _collect_manifests(root: Path) -> list[Path]:
    return [path for path in sorted(root.rglob("*.pp")) if path.is_file()]


def _run_once(
    sources: list[str],
    *,
    label: str,
    show_progress: bool,
) -> tuple[float, int, int, int]:
    start = time.perf_counter()
    total_tokens = 0
    total_declarations = 0
    total_diagnostics = 0
    iterator = tqdm(sources, desc=label, unit="file") if show_progress else sources
    for text in iterator:
        parsed = parse(text)
        total_tokens += len(parsed.tokens)
        total_declarations += len(parsed.root.children)
        total_diagnostics += len(parsed.diagnostics)
    duration = time.perf_counter() - start
    return duration, total_tokens, total_declarations, total_diagnostics


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark Puppet manifest parsing throughput")
    parser.add_argument("manifest_root", type=Path, help="Directory searched recursively for .pp files")
    parser.add_argument("--runs", type=int, default=5, help="Measured runs")
    parser.add_argument("--warmups", type=int, default=1, help="Warmup runs")
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars (useful for pure timing)",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Run cProfile and print top hotspots",
    )
    parser.add_argument(
        "--profile-top",
        type=int,
        default=30,
        help="Number of cProfile rows to print (default: 30)",
    )
    parser.add_argument(
        "--profile-sort",
        type=str,
        default="tottime",
        help="cProfile sort key (default: tottime, common: cumulative)",
    )
    parser.add_argument(
        "--limit-files",
        type=int,
        default=0,
        help="Optional file limit for quick profiling/smoke tests (0 = all files)",
    )
    args = parser.parse_args()

    root: Path = args.manifest_root
    if not root.exists() or not root.is_dir():
        raise SystemExit(f"Invalid manifest root: {root}")

    files = _collect_manifests(root)
    if not files:
        raise SystemExit(f"No .pp files found under {root}")
    if args.limit_files > 0:
        files = files[: args.limit_files]

    # Read once so the timings measure lexing and parsing only.
    sources = [path.read_text(encoding="utf-8") for path in files]
    total_chars = sum(len(text) for text in sources)
    show_progress = not args.no_progress

    def _benchmark() -> tuple[list[float], int, int, int]:
        for warmup_idx in range(max(args.warmups, 0)):
            _run_once(
                sources,
                label=f"warmup {warmup_idx + 1}/{max(args.warmups, 0)}",
                show_progress=show_progress,
            )

        timings: list[float] = []
        tokens_count = 0
        declarations_count = 0
        diagnostics_count = 0
        for run_idx in range(max(args.runs, 1)):
            duration, tokens_count, declarations_count, diagnostics_count = _run_once(
                sources,
                label=f"run {run_idx + 1}/{max(args.runs, 1)}",
                show_progress=show_progress,
            )
            timings.append(duration)
        return timings, tokens_count, declarations_count, diagnostics_count

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        timings, tokens_count, declarations_count, diagnostics_count = _benchmark()
        profiler.disable()
        stream = io.StringIO()
        stats = pstats.Stats(profiler, stream=stream)
        stats.sort_stats(args.profile_sort).print_stats(max(args.profile_top, 1))
        print("\n[cProfile top functions]")
        print(stream.getvalue())
    else:
        timings, tokens_count, declarations_count, diagnostics_count = _benchmark()

    mean = statistics.mean(timings)

    print(f"Dataset: {root}")
    print(f"Files: {len(files)}")
    print(f"Chars: {total_chars}")
    print(f"Tokens: {tokens_count}")
    print(f"Top-level declarations: {declarations_count}")
    print(f"Diagnostics: {diagnostics_count}")
    print(f"Runs: {len(timings)} (warmups={max(args.warmups, 0)})")
    print(f"Best:   {min(timings):.4f}s")
    print(f"Median: {statistics.median(timings):.4f}s")
    print(f"Mean:   {mean:.4f}s")
    print(f"Worst:  {max(timings):.4f}s")
    print(f"Files/s (mean):  {len(files) / mean:.1f}")
    print(f"Tokens/s (mean): {tokens_count / mean:.1f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
