"""Benchmarking subsystem for warmbench.

Provides the single-trial timer, the warmup/sampling engine, the report
session with JSON persistence, and table/export formatting.
"""
