"""Adapters connecting rrdbridge to storage engines."""
