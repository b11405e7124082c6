"""
Application layer package.

One use case class per pattern operation, each exposing a single async
`execute`. Use cases see only domain ports; adapters are injected.
"""
