#!/usr/bin/env python3
"""
Frame-cost benchmark for the particle mesh.

Times full update + render steps on a headless surface and compares:
- pure Python vs NumPy pair pass
- unbounded vs capped work budget

Usage:
    python -m canvas_particles.utils.benchmark [--particles 300] [--iterations 10]
"""

from __future__ import annotations

import argparse
import math
import random
import sys
import time

import numpy as np

from canvas_particles.core.driver import CanvasParticles
from canvas_particles.params import ParticlesParams
from canvas_particles.rendering.drawing import RecordingSurface


def build_driver(
    n_particles: int,
    *,
    force_backend: str = "python",
    max_work: float = math.inf,
    width: int = 1280,
    height: int = 720,
    seed: int = 42,
) -> CanvasParticles:
    """Driver whose population is exactly ``n_particles`` (ppm is raised to match)."""
    params = ParticlesParams(
        width=width,
        height=height,
        ppm=1e9,
        max_particles=n_particles,
        max_work=max_work,
        gravity_repulsive=2.0,
        gravity_pulling=0.5,
        force_backend=force_backend,
        seed=seed,
    )
    surface = RecordingSurface(width, height)
    return CanvasParticles(surface, params, rng=random.Random(seed))


def time_steps(driver: CanvasParticles, iterations: int) -> tuple[float, float, float]:
    """Returns (mean_ms, std_ms, mean_lines)."""
    times = []
    lines = []
    for _ in range(iterations):
        t0 = time.perf_counter()
        stats = driver.step()
        times.append(time.perf_counter() - t0)
        lines.append(stats.lines_drawn)

    ms = np.array(times) * 1000.0
    return float(ms.mean()), float(ms.std()), float(np.mean(lines))


def run_benchmark(n_particles: int, iterations: int, max_work: float) -> dict[str, float]:
    print(f"\n{'='*60}")
    print(f"Benchmark: {n_particles} particles, {iterations} iterations")
    print(f"{'='*60}")

    cases = [
        ("python", "python", math.inf),
        ("numpy", "numpy", math.inf),
        (f"python, max_work={max_work:g}", "python", max_work),
    ]
    results: dict[str, float] = {}
    for label, backend, budget in cases:
        print(f"{label}...", end=" ", flush=True)
        driver = build_driver(n_particles, force_backend=backend, max_work=budget)
        mean_ms, std_ms, mean_lines = time_steps(driver, iterations)
        print(f"{mean_ms:.2f} ± {std_ms:.2f} ms ({mean_lines:.0f} lines)")
        results[label] = mean_ms

    base = results["python"]
    print("\nSummary:")
    for label, mean_ms in results.items():
        speedup = base / mean_ms if mean_ms > 0 else 0.0
        print(f"  {label}: {mean_ms:.2f} ms ({speedup:.1f}x vs python)")
    return results


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark particle mesh frame steps")
    parser.add_argument("--particles", "-n", type=int, default=300, help="Number of particles")
    parser.add_argument("--iterations", "-i", type=int, default=10, help="Benchmark iterations")
    parser.add_argument("--max-work", type=float, default=10.0, help="Work budget for the capped run")
    parser.add_argument("--sweep", action="store_true", help="Run sweep over particle counts")
    args = parser.parse_args(argv)

    print("Canvas particles frame benchmark")
    print(f"Platform: {sys.platform}")
    print(f"NumPy: {np.__version__}")

    if args.sweep:
        for n in (50, 100, 200, 400, 800):
            run_benchmark(n, args.iterations, args.max_work)
    else:
        run_benchmark(args.particles, args.iterations, args.max_work)


if __name__ == "__main__":
    main()
