"""Domain layer - table model, schema validation and locking."""
