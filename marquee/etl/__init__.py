"""Catalog refresh pipeline: extractors, processors and orchestration."""
