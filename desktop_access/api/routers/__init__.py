"""API routers for desktop-access."""
