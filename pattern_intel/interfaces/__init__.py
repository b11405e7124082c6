"""HTTP interface layer: routers, request schemas and dependency wiring."""
