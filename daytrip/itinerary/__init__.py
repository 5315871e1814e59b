"""
Itinerary generation engine.

Responsibilities:
- Normalize user preferences into food/culture/transport choices.
- Pool candidates per preference dimension around the chosen anchor.
- Select exactly N places under the restaurant composition rule.
- Order the selection into a visiting sequence.
"""
