"""
Infrastructure adapters for the patterns bounded context.

Each adapter implements a domain port (ABC) and connects
to an external system: the SQL data store or a vector index.
"""
