"""HTTP surface: request handler core, routes and exception handlers."""
