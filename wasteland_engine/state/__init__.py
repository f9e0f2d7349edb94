"""Game state persistence helpers."""
