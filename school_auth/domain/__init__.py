"""Domain layer: aggregate, entities, value objects, events, ports.

No dependencies on application or infrastructure layers.
"""
