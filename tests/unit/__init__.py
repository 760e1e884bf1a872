"""
Unit tests for the entity API and conformance harness components
"""
