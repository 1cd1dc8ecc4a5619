"""HTTP layer: routers, dependencies, and response envelope."""
