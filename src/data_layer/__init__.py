"""
Data Layer - static map data for the logistics simulation.

Provides:
- LOCATIONS: named points in the 0~100 map plane
- RouteRegistry: routes with precomputed Bezier paths and samples
- DEFAULT_FLEET: initial truck profiles
"""
