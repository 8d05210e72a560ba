#!/usr/bin/env python3
"""
Performance benchmark for the flow field simulation.

Times one tick (grid regeneration + particle pass) per steering mode:
- flow: particles follow the noise field
- follow: particles home toward a fixed point
- collective: particles seek evenly spaced targets on each curve family

Usage:
    python -m particle_flow2d.utils.benchmark [--particles 6000] [--iterations 20]
"""

from __future__ import annotations

import argparse
import sys
import time

import numpy as np

from particle_flow2d.core.curves import CurveFamily
from particle_flow2d.core.sim import FlowFieldSim
from particle_flow2d.core.vector import Vector2
from particle_flow2d.params import FlowParams
from particle_flow2d.rendering.renderer import RecordingRenderer


def make_sim(n: int, *, width: int = 800, height: int = 600, seed: int = 42) -> FlowFieldSim:
    params = FlowParams(width=width, height=height, particle_count=n, seed=seed).clamp()
    return FlowFieldSim(params)


def time_ticks(sim: FlowFieldSim, iterations: int, *, pointer: Vector2 | None = None) -> tuple[float, float]:
    """Mean and std of tick time in ms."""
    times = np.empty(iterations, dtype=np.float64)
    for i in range(iterations):
        t0 = time.perf_counter()
        sim.step(1.0 / 60.0, pointer=pointer)
        times[i] = time.perf_counter() - t0
    return float(times.mean() * 1000.0), float(times.std() * 1000.0)


def run_benchmark(n: int, iterations: int = 20) -> dict[str, float]:
    print(f"\n{'='*60}")
    print(f"Benchmark: {n} particles, {iterations} iterations")
    print(f"{'='*60}")

    results: dict[str, float] = {}

    sim = make_sim(n)
    mean, std = time_ticks(sim, iterations)
    results["flow"] = mean
    print(f"  flow field:          {mean:8.2f} ± {std:.2f} ms")

    sim = make_sim(n)
    sim.modes.toggle_follow()
    mean, std = time_ticks(sim, iterations, pointer=Vector2(400.0, 300.0))
    results["follow"] = mean
    print(f"  follow point:        {mean:8.2f} ± {std:.2f} ms")

    for family in CurveFamily:
        sim = make_sim(n)
        sim.modes.toggle_collective()
        sim.modes.curve_family = family
        mean, std = time_ticks(sim, iterations)
        results[f"collective_{family.value}"] = mean
        print(f"  collective {family.label:<18} {mean:8.2f} ± {std:.2f} ms")

    sim = make_sim(n)
    renderer = RecordingRenderer()
    t0 = time.perf_counter()
    for _ in range(iterations):
        sim.render(renderer)
    results["render_recording"] = (time.perf_counter() - t0) / iterations * 1000.0
    print(f"  render (recording):  {results['render_recording']:8.2f} ms")

    issues = sim.validate_state()
    if issues:
        print(f"  [warn] {len(issues)} state issues, first: {issues[0]}", file=sys.stderr)

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark flow field simulation ticks")
    parser.add_argument("--particles", "-n", type=int, default=6000, help="Number of particles")
    parser.add_argument("--iterations", "-i", type=int, default=20, help="Benchmark iterations")
    parser.add_argument("--sweep", action="store_true", help="Run sweep over particle counts")
    args = parser.parse_args()

    print("Flow Field Performance Benchmark")
    print(f"Platform: {sys.platform}")
    print(f"NumPy: {np.__version__}")

    if args.sweep:
        for n in [50, 500, 2000, 6000, 12000]:
            run_benchmark(n, args.iterations)
    else:
        run_benchmark(args.particles, args.iterations)


if __name__ == "__main__":
    main()
