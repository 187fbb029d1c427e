"""HTTP API for the player statistics dashboard."""
