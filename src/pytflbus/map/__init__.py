"""Slippy-map viewport engine: projection, viewport state, gestures and markers."""
