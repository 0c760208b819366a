"""File type detection."""
