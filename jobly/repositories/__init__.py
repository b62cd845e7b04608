"""Entity access: one module per table."""
