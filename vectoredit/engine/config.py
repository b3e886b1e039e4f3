"""Simplification configuration: numerical thresholds for every stage."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SimplifyConfig:
    """Thresholds used by the simplification stages.

    Tolerances that scale with the artwork are expressed as factors of the
    per-path tolerance; the rest are absolute distances in path units.
    """

    # Point sampling
    samples_per_curve: int = 5  # curves → start, 4 interior samples, end
    duplicate_epsilon: float = 1e-9

    # Noise reduction (Visvalingam-Whyatt)
    noise_factor: float = 0.1  # × tolerance; only micro-noise goes

    # Corner detection
    corner_angle: float = 30.0  # degrees
    min_edge_length: float = 0.01  # shorter edges carry no direction

    # Curve refitting
    collinear_factor: float = 2.5  # × tolerance; wobbly runs become lines
    max_fit_turn: float = 100.0  # degrees of turning before a run is split
    max_fit_iterations: int = 4  # Newton-Raphson reparameterization passes

    # Closure repair
    closure_epsilon: float = 0.01  # first/last closer than this = closed

    # G1 continuity
    g1_max_angle: float = 45.0  # degrees; sharper joins stay kinked
    handle_epsilon: float = 0.01  # shorter handles are left alone
