"""
Storage Infrastructure Module

Object storage for payment proofs.
"""

from marketplace.infrastructure.storage.proof_storage import (
    ProofStorageService,
    get_proof_storage,
)

__all__ = ["ProofStorageService", "get_proof_storage"]
