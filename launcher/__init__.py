"""Plugin discovery and query runtime for the launcher."""
