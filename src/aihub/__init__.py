"""aihub-server: multi-provider AI chat service with failover."""

__version__ = "1.0.0"
