"""
Dated-event provider.

Responsibilities:
- Keep the municipal festival calendar in memory.
- Answer which festivals run on a given day, as itinerary candidates.
"""
