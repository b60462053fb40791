#!/usr/bin/env python3
"""
Demo: Accuracy and Cost of θ

Sweeps the Barnes-Hut threshold θ on one random field:
1. Compute exact forces by brute force
2. Compute Barnes-Hut forces for several θ
3. Time a short run for each θ
4. Plot force error and run time against θ

θ = 0 reproduces brute force; larger θ is faster and coarser.
"""

import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path

from nbodysim.analysis import barnes_hut_forces, brute_force_forces, max_relative_force_error
from nbodysim.core import Settings
from nbodysim.formations import random_field
from nbodysim.simulation import SimulationDriver


def main():
    rng = np.random.default_rng(42)

    print("=" * 60)
    print("  BARNES-HUT θ SWEEP")
    print("=" * 60)

    settings = Settings(num_bodies=300, num_steps=20)
    bodies = random_field(settings, rng)
    thetas = [0.0, 0.25, 0.5, 0.75, 1.0, 1.5]

    print(f"\n1. Exact forces for {settings.num_bodies} bodies...")
    exact = brute_force_forces(bodies, settings.G)

    print("\n2. Barnes-Hut error and run time:")
    errors = []
    times = []
    for theta in thetas:
        approx = barnes_hut_forces(bodies, theta, settings.G, settings.bounds_padding)
        error = max_relative_force_error(exact, approx)

        run_settings = settings.with_overrides(theta=theta)
        driver = SimulationDriver(run_settings, [b.copy() for b in bodies])
        elapsed = driver.run_steps()["elapsed"]

        errors.append(error)
        times.append(elapsed)
        print(f"   θ={theta:<5} max rel. error={error:.2e}  {settings.num_steps} steps in {elapsed:.2f} s")

    print("\n3. Creating visualization...")
    fig, (ax_err, ax_time) = plt.subplots(1, 2, figsize=(12, 5))

    ax_err.semilogy(thetas[1:], errors[1:], "o-")
    ax_err.set_xlabel("θ")
    ax_err.set_ylabel("Max relative force error")
    ax_err.set_title("Approximation error")
    ax_err.grid(True, alpha=0.3)

    ax_time.plot(thetas, times, "o-", color="tab:orange")
    ax_time.set_xlabel("θ")
    ax_time.set_ylabel("Seconds")
    ax_time.set_title(f"{settings.num_steps} steps, {settings.num_bodies} bodies")
    ax_time.grid(True, alpha=0.3)
    fig.tight_layout()

    output_dir = Path("output/demo_theta_accuracy")
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / "theta_sweep.png"
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close()
    print(f"   Saved: {output_path}")

    print("\n" + "=" * 60)
    print("  SUMMARY")
    print("=" * 60)
    print(f"  • θ=0 error: {errors[0]:.1e} (brute force up to rounding)")
    print(f"  • θ=0.5 error: {errors[2]:.1e}")
    print(f"  • Speed-up from θ=0 to θ=1: {times[0] / times[4]:.1f}x")
    print("=" * 60)


if __name__ == "__main__":
    main()
