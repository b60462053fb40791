#!/usr/bin/env python3
"""
Demo: Ring Formation

A ring of light bodies orbiting a massive central body:
1. Generate the ring formation
2. Run Barnes-Hut on four worker threads, recording positions
3. Check momentum and energy drift
4. Plot the trajectories

The central body barely moves; the ring bodies curve around it.
"""

import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path

from nbodysim.analysis import TrajectoryRecorder, total_energy, total_momentum
from nbodysim.core import Settings
from nbodysim.formations import ring_formation
from nbodysim.simulation import SimulationDriver
from nbodysim.viz import plot_trajectories, save_figure


def main():
    rng = np.random.default_rng(42)

    print("=" * 60)
    print("  RING FORMATION")
    print("=" * 60)

    settings = Settings(num_bodies=200, num_steps=500, theta=0.5, num_workers=4, ring=True)
    bodies = ring_formation(settings, rng)

    print(f"\n1. Setup:")
    print(f"   Bodies: {settings.num_bodies} (1 central, {settings.num_bodies - 1} in the ring)")
    print(f"   Central mass: {bodies[0].mass:.1e}")
    print(f"   Workers: {settings.num_workers}, θ={settings.theta}")

    p0 = total_momentum(bodies)
    e0 = total_energy(bodies, settings.G)

    recorder = TrajectoryRecorder(every=5)
    recorder.record_initial(bodies)

    print("\n2. Running...")
    driver = SimulationDriver(settings, bodies, on_step=recorder)
    stats = driver.run_steps()
    print(f"   {stats['steps_completed']} steps in {stats['elapsed']:.2f} s")
    print(f"   Frames recorded: {len(recorder)}")

    p1 = total_momentum(bodies)
    e1 = total_energy(bodies, settings.G)

    print("\n3. Conservation:")
    print(f"   |Δp|:     {np.linalg.norm(p1 - p0):.3e}")
    print(f"   ΔE / |E|: {(e1 - e0) / abs(e0):.3e}")
    print(f"   Central body moved to ({bodies[0].x:.1f}, {bodies[0].y:.1f})")

    print("\n4. Creating visualization...")
    fig = plot_trajectories(recorder, settings, title=f"Ring formation, {settings.num_steps} steps")

    output_dir = Path("output/demo_ring")
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / "ring.png"
    save_figure(fig, output_path)
    plt.close()
    print(f"   Saved: {output_path}")

    print("\n" + "=" * 60)
    print("  SUMMARY")
    print("=" * 60)
    print(f"  • The central body stays at the centre of the ring")
    print(f"  • Ring bodies are deflected by the central mass")
    print(f"  • Relative energy drift: {(e1 - e0) / abs(e0):.2e}")
    print("=" * 60)


if __name__ == "__main__":
    main()
