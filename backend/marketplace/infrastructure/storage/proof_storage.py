"""
Payment Proof Storage

Uploads payment-proof files (receipts, screenshots) to a Supabase Storage
bucket and returns the object path used as the proof identifier.
"""

import asyncio
import logging
from typing import Optional
from uuid import UUID, uuid4

from supabase import create_client, Client
from supabase.lib.client_options import ClientOptions

from marketplace.config.settings import get_settings
from marketplace.domain.payment import ProofFile
from marketplace.infrastructure.exceptions import (
    ConfigurationError,
    StorageError,
    ValidationError,
)


logger = logging.getLogger(__name__)


class ProofStorageService:
    """
    Object store client for payment proofs.

    The Supabase client is created on first upload, so constructing the
    service never touches the network.
    """

    def __init__(self):
        settings = get_settings()
        self._url = settings.supabase_url
        self._key = settings.supabase_service_role_key
        self._bucket = settings.proof_bucket
        self._max_size = settings.max_proof_size_bytes
        self._allowed_types = set(settings.allowed_proof_types)
        self._client: Optional[Client] = None

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def client(self) -> Client:
        """Get the Supabase client, creating it on first use."""
        if self._client is None:
            if not self._url or not self._key:
                raise ConfigurationError(
                    "Missing proof storage configuration",
                    missing_keys=["SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"],
                )
            options = ClientOptions(storage_client_timeout=30)
            self._client = create_client(self._url, self._key, options)
        return self._client

    def validate(self, proof: ProofFile) -> None:
        """
        Reject empty, oversized, or unsupported files.

        Raises:
            ValidationError: file fails a check
        """
        if proof.size == 0:
            raise ValidationError("Payment proof file is empty")
        if proof.size > self._max_size:
            raise ValidationError(
                "Payment proof file is too large",
                details={"max_bytes": self._max_size, "size": proof.size},
            )
        if proof.content_type not in self._allowed_types:
            raise ValidationError(
                f"Unsupported payment proof type: {proof.content_type}",
                details={"allowed": sorted(self._allowed_types)},
            )

    async def upload(self, user_id: UUID, proof: ProofFile) -> str:
        """
        Store a proof file under ``<user_id>/<uuid>.<ext>``.

        Args:
            user_id: Owner of the proof
            proof: File content and metadata

        Returns:
            Object path inside the bucket

        Raises:
            ValidationError: file fails validation
            StorageError: the object store rejected the upload
        """
        self.validate(proof)
        path = f"{user_id}/{uuid4()}.{proof.extension}"

        try:
            bucket = self.client.storage.from_(self._bucket)
            await asyncio.to_thread(
                bucket.upload,
                path,
                proof.content,
                {"content-type": proof.content_type},
            )
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Proof upload to bucket {self._bucket} failed: {e}")
            raise StorageError(
                "Failed to store payment proof",
                bucket=self._bucket,
                original_error=e,
            )

        logger.info(f"Stored payment proof {path} ({proof.size} bytes)")
        return path


# =============================================================================
# Singleton Instance (Dependency Injection Ready)
# =============================================================================

_proof_storage_instance: Optional[ProofStorageService] = None


def get_proof_storage() -> ProofStorageService:
    """Get or create proof storage singleton."""
    global _proof_storage_instance

    if _proof_storage_instance is None:
        _proof_storage_instance = ProofStorageService()

    return _proof_storage_instance
