"""ASGI middleware: authentication, request IDs and logging."""
