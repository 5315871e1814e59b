"""
In-process analytics.

Responsibilities:
- Record one event per generated itinerary.
- Summarise request mix, latency and short results for the admin view.
"""
