"""
Entity Conformance Suite

Runs every registered entity through the same lifecycle: metadata checks,
create → get → count, rejection of malformed requests, delete → get.
"""

__version__ = "1.0.0"
