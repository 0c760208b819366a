"""Renderers for check results."""
