"""
Domain layer: entities, exceptions and pure request rules.
"""
