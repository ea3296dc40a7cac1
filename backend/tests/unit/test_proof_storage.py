"""
Unit tests for ProofStorageService.

The Supabase client is replaced with a MagicMock; no network access.
"""

from unittest.mock import MagicMock, patch
from uuid import UUID

import pytest

from marketplace.domain.payment import ProofFile
from marketplace.infrastructure.exceptions import (
    ConfigurationError,
    StorageError,
    ValidationError,
)
from marketplace.infrastructure.storage.proof_storage import ProofStorageService


USER_ID = UUID("11111111-1111-4111-8111-111111111111")


@pytest.fixture
def storage():
    service = ProofStorageService()
    service._client = MagicMock()
    return service


def png(size: int = 16) -> ProofFile:
    return ProofFile(filename="receipt.png", content=b"x" * size, content_type="image/png")


class TestValidation:

    def test_rejects_empty_file(self, storage):
        with pytest.raises(ValidationError):
            storage.validate(png(0))

    def test_rejects_oversized_file(self, storage):
        storage._max_size = 10
        with pytest.raises(ValidationError) as exc_info:
            storage.validate(png(11))
        assert exc_info.value.details["max_bytes"] == 10

    def test_rejects_unsupported_type(self, storage):
        proof = ProofFile(filename="notes.txt", content=b"hello", content_type="text/plain")
        with pytest.raises(ValidationError):
            storage.validate(proof)

    def test_accepts_pdf(self, storage):
        storage.validate(ProofFile(filename="r.pdf", content=b"%PDF", content_type="application/pdf"))


class TestUpload:

    @pytest.mark.asyncio
    async def test_upload_path_is_scoped_to_user(self, storage):
        path = await storage.upload(USER_ID, png())

        assert path.startswith(f"{USER_ID}/")
        assert path.endswith(".png")
        bucket = storage._client.storage.from_.return_value
        storage._client.storage.from_.assert_called_once_with("payment-proofs")
        uploaded_path, content, options = bucket.upload.call_args.args
        assert uploaded_path == path
        assert content == b"x" * 16
        assert options == {"content-type": "image/png"}

    @pytest.mark.asyncio
    async def test_store_failure_becomes_storage_error(self, storage):
        bucket = storage._client.storage.from_.return_value
        bucket.upload.side_effect = RuntimeError("bucket not found")

        with pytest.raises(StorageError) as exc_info:
            await storage.upload(USER_ID, png())

        assert exc_info.value.details["bucket"] == "payment-proofs"
        assert isinstance(exc_info.value.original_error, RuntimeError)

    @pytest.mark.asyncio
    async def test_invalid_file_never_reaches_store(self, storage):
        with pytest.raises(ValidationError):
            await storage.upload(USER_ID, png(0))

        storage._client.storage.from_.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_configuration(self):
        with patch("marketplace.infrastructure.storage.proof_storage.get_settings") as mock_settings:
            mock_settings.return_value = MagicMock(
                supabase_url=None,
                supabase_service_role_key=None,
                proof_bucket="payment-proofs",
                max_proof_size_bytes=1024,
                allowed_proof_types=["image/png"],
            )
            service = ProofStorageService()

        with pytest.raises(ConfigurationError):
            await service.upload(USER_ID, png())
