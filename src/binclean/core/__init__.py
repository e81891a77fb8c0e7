"""Core cleaning, source-control and reporting logic."""
