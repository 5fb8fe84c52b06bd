"""HTTP API routes and handlers."""
