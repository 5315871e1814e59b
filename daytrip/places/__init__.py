"""
Place-search layer.

Responsibilities:
- Talk to the Google Places API and expose results as ``RawPlace`` values.
- Map provider type tags onto the closed category taxonomy.
- Aggregate candidates under progressively relaxed search parameters.
- Serve placeholder candidates when no API key is configured.
"""
