"""Business logic called by the routes and CLI."""
