"""Monitoring: Prometheus pipeline and HTTP metrics."""
