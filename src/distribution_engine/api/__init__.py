"""Boundary schemas for the distribution engine."""
