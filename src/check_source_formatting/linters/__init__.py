"""Adapters running grammar-aware token rules over whole files."""
