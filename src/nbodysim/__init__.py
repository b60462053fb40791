"""
nbodysim: 2D Barnes-Hut N-body Gravity Simulator

Simulates the gravitational evolution of N point masses over discrete
time steps.

Core concepts:
- A quadtree groups distant bodies into single point masses (Barnes-Hut)
- θ controls when a group is far enough away to be approximated
- Worker threads build the tree and evaluate forces in barrier-separated phases
- Brute-force O(N²) summation is kept as a reference for cross-checking
"""

__version__ = "0.1.0"
