"""Grid navigation engine for a snake-style agent."""
