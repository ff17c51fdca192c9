"""
diagramflow - domain layer of a step-based diagram editor.

Features:
- components: typed diagram components, factory and store
- connectors: per-context connector rules and the rule engine
"""
__version__ = "1.0.0"
