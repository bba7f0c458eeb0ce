"""Data models: model registry, request and response schemas."""
