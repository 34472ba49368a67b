"""RecordVault — personal records manager.

A small REST backend (and matching client) for keeping personal records:
accounts, certificates, scholarships. Every record belongs to exactly one
user and is only reachable with that user's token.
"""

__version__ = "0.1.0"
