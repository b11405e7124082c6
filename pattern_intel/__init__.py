"""
Strategy pattern intelligence service.

Layers:
    domain          entities, ports, feature encoding and narrative rules
    application     one use case per operation
    infrastructure  vector index and SQL adapters
    interfaces      FastAPI routers and schemas
    shared          logging, error mapping, security middleware
"""
