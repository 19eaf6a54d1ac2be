"""Rocket flight physics: vectors, RK4 stepping, atmosphere, design estimates, aerodynamics and flow modelling."""

__version__ = "0.1.0"

__all__ = [
    "aerodynamics",
    "cache",
    "cfd",
    "cfd_field",
    "design",
    "environment",
    "state",
    "units",
    "vectors",
    "vehicle",
]