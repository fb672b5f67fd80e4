"""Command builders and the engine port."""
