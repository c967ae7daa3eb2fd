"""State/store layer.

This package is the single source of truth for the entities currently on
the map.  Search, nearby lookups, geolocation and the live poller all
publish whole-layer replacements here; readers always get a complete
snapshot.
"""
