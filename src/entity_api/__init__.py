"""
Entity API

API4-style CRUD over registered entities, plus the conformance harness that
checks every entity honours the same lifecycle.
"""

__version__ = "1.0.0"
