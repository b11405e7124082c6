"""
Application layer for the patterns bounded context.

Use cases coordinate domain entities and ports to fulfill
business operations. No framework or infrastructure imports allowed.
"""
