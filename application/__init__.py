"""
Application Layer for the logbook engine.

This package contains:
- ports/: Abstract interfaces the engine needs (Data Store, carry-over)
- use_cases/: Clone Engine and Template Generator
- exceptions: Error taxonomy shared by every layer
"""
