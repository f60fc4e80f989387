"""Route blueprints, one per feature."""
