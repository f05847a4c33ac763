"""Infrastructure Layer - storage backends, database lifecycle, and logging.

Invariants:
    - Backends implement core.repository_protocols.UserRepository
    - Driver exceptions never escape; they are mapped to core/errors.py types
"""
