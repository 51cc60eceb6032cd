"""Infrastructure layer — driver event loop and connection lifecycle.

This layer depends on stdlib and PyMongo's asyncio client.
It must never import from services, commands, or output.
"""
