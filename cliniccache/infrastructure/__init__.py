"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the cache to durable storage, configuration, logging and the
console.
"""
