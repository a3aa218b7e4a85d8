"""Domain layer: entities, exceptions and pure business rules."""
