"""Domain layer — input models, the favor ledger, and list consolidation.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
