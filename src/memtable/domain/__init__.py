"""Domain layer: schemas, rows, tables and the change broadcast."""
