"""Service layer — command dispatch and completion delivery.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
