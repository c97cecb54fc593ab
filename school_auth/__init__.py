"""School authentication and session-security core.

Layers (hexagonal architecture):
- core: Result types, error taxonomy, settings, composition root
- domain: User aggregate, Session entity, value objects, events, ports
- application: commands, queries, DTOs and their handlers
- infrastructure: adapters for hashing, tokens, rate limiting, persistence
"""
