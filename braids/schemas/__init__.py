"""Request schemas, one module per entity."""
