"""Game-specific systems built on the core foundation."""
