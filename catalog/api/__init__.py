"""HTTP layer: routers, dependencies and app assembly."""
