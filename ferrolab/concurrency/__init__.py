"""Dot products and thread-safe metric counters."""