"""Infrastructure adapters: database and blob storage."""
