"""Core utilities and configurations."""
