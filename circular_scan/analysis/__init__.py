"""Dependency graph building and cycle enumeration."""
