"""
Convoy route planning package.

Three-layer architecture:
- core: Waypoints, legs, routes, locations, risk areas, risk factors
- algorithms: Route generation, risk-area avoidance, scoring and ranking
- app: Stateful convoy planner, risk report, command-line interface

Examples
--------
>>> from convoy_routing.core import Route, WayPoint, find_location
>>> from convoy_routing.algorithms import generate_alternative_routes
>>> from convoy_routing.app import ConvoyPlanner, PlannerConfig
"""

__version__ = "2025dev"
