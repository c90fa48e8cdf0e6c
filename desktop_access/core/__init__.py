"""Core domain logic for desktop-access."""
