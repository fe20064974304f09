"""Core mathematics and configuration for the FRC line maker.

This package contains the pure building blocks of the pricing pipeline:

- ``valuation_config`` — immutable tunable constants (rank table, floors)
- ``valuation``        — per-team value and alliance aggregation
- ``line_math``        — over/under line and payout multipliers

Nothing in this package imports from ``backend.services``.
All modules are side-effect-free and unit-testable in isolation.
"""
