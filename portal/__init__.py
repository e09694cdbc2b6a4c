"""Interview portal frontend service."""
