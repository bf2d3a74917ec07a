"""Infrastructure layer: persistence and side-effecting services."""
