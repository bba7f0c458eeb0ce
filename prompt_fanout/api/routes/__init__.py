"""API route handlers for prompt-fanout.

Routes:
- generate: /generate (fan-out endpoint, any method)
- models: /models
- health: /health, /health/ready
"""

__all__: list[str] = []
