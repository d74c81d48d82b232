"""
Core services of the logbook engine.

- history_reader: flattened set history and workout reads
- aggregation: chart series and weekly rollups (pure)
- pr_tracker: personal record detection and appends
- comparison: last occurrence of an exercise and trend
- weight_resolver: carry-over weights for generated sets
- library_service: exercise and day library
- week_template_service: week template reads and simple writes
"""
