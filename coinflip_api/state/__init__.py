"""Redis persistence for player histories."""
