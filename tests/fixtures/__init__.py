"""Shared pytest fixtures and test doubles."""
