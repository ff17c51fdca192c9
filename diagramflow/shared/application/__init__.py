"""
Shared application layer: validation framework and registries.
"""
