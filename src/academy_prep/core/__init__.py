"""Core business logic: grading, CFA scoring, application progress, models.

This module is framework-agnostic. It has no dependency on MCP, FastMCP,
SQLAlchemy or any server framework, and performs no I/O.
"""
