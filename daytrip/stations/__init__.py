"""
Anchor resolver.

Responsibilities:
- Keep the subway stations served by the planner in memory.
- Resolve a station name to the coordinates used as search origin.
"""
