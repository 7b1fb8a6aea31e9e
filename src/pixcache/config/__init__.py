"""Configuration: defaults, YAML/env hierarchy and validated settings."""
