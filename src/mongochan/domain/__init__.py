"""Domain layer — coercion, query building, signature binding.

This layer depends only on stdlib, pydantic, and ``bson`` value types.
It must never import from services, infrastructure, commands, or config.
"""
