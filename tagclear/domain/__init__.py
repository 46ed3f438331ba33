"""In-memory records and reconciliation rules, independent of the database."""
