"""
Tracking Package - recurrence, stopwatch, aggregation and search
"""

# Keep initializer lightweight; import concrete modules directly at call sites.
__all__: list[str] = []
