"""
Shared infrastructure used by all features.
"""
