"""Application layer: commands, queries, handlers and DTOs (CQRS)."""
