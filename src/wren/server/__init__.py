"""ASGI dispatcher, error channel, negotiation, and dev server."""
