"""Domain layer: entities, repository interfaces and services."""
