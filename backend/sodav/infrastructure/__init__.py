"""Infrastructure — database sessions, identity provider client, logging."""
