"""Unit tests for the local backend: SQLite document store, filesystem blobs, in-memory auth."""

import pytest

from medadmin.domain.entities import AssetHandle
from medadmin.domain.exceptions import AuthError, StoreError, UploadError
from medadmin.infrastructure.auth.local_auth_provider import LocalAuthProvider
from medadmin.infrastructure.database import Base, create_engine_and_factory
from medadmin.infrastructure.database.repositories import SQLAlchemyDocumentStore
from medadmin.infrastructure.storage.local_blob_store import LocalBlobStore


@pytest.fixture
async def store(tmp_path):
    engine, session_factory = create_engine_and_factory(f"sqlite:///{tmp_path / 'console.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield SQLAlchemyDocumentStore(session_factory)
    await engine.dispose()


class TestSQLAlchemyDocumentStore:
    async def test_lists_in_creation_order(self, store):
        await store.create("medicines", {"medicineName": "Zinc"}, identifier="z")
        await store.create("medicines", {"medicineName": "Aspirin"}, identifier="a")
        await store.create("orders", {"name": "Jamie"}, identifier="o1")

        assert await store.fetch_all("medicines") == [
            ("z", {"medicineName": "Zinc"}),
            ("a", {"medicineName": "Aspirin"}),
        ]

    async def test_create_allocates_identifier_when_none_given(self, store):
        identifier = await store.create("medicines", {"medicineName": "Zinc"})

        assert len(identifier) == 32
        assert await store.fetch_all("medicines") == [(identifier, {"medicineName": "Zinc"})]

    async def test_create_with_taken_identifier_conflicts(self, store):
        await store.create("medicines", {"medicineName": "Zinc"}, identifier="z")

        with pytest.raises(StoreError) as exc_info:
            await store.create("medicines", {"medicineName": "Other"}, identifier="z")
        assert exc_info.value.status_code == 409

    async def test_update_merges_fields(self, store):
        await store.create("medicines", {"medicineName": "Zinc", "price": 3.5, "imageUrl": "u"}, identifier="z")

        await store.update("medicines", "z", {"price": 4.0})

        assert await store.fetch_all("medicines") == [
            ("z", {"medicineName": "Zinc", "price": 4.0, "imageUrl": "u"})
        ]

    async def test_update_of_missing_document(self, store):
        with pytest.raises(StoreError) as exc_info:
            await store.update("medicines", "nope", {"price": 1.0})
        assert exc_info.value.status_code == 404

    async def test_delete_is_idempotent(self, store):
        await store.create("medicines", {"medicineName": "Zinc"}, identifier="z")

        await store.delete("medicines", "z")
        await store.delete("medicines", "z")

        assert await store.fetch_all("medicines") == []


class TestLocalBlobStore:
    async def test_upload_writes_file_and_resolves_url(self, tmp_path):
        blobs = LocalBlobStore(str(tmp_path / "uploads"), "http://localhost:8020/assets/")

        handle = await blobs.upload("medicines/abc", b"png-bytes", "image/png")
        url = await blobs.resolve_url(handle)

        assert (tmp_path / "uploads" / "medicines" / "abc").read_bytes() == b"png-bytes"
        assert url == "http://localhost:8020/assets/medicines/abc"

    async def test_path_cannot_escape_upload_dir(self, tmp_path):
        blobs = LocalBlobStore(str(tmp_path / "uploads"), "http://assets.test")

        handle = await blobs.upload("../../etc/passwd", b"x")

        assert handle.path == "etc/passwd"
        assert (tmp_path / "uploads" / "etc" / "passwd").exists()

    async def test_resolving_missing_blob_fails(self, tmp_path):
        blobs = LocalBlobStore(str(tmp_path), "http://assets.test")

        with pytest.raises(UploadError):
            await blobs.resolve_url(AssetHandle(path="medicines/missing"))


class TestLocalAuthProvider:
    async def test_sign_in_is_case_insensitive_on_email(self):
        provider = LocalAuthProvider({"Admin@Example.com": "secret123"})

        snapshot = await provider.sign_in("admin@example.com", "secret123")

        assert snapshot.authenticated
        assert provider.id_token == "local:admin@example.com"

    async def test_wrong_password(self):
        provider = LocalAuthProvider({"admin@example.com": "secret123"})

        with pytest.raises(AuthError) as exc_info:
            await provider.sign_in("admin@example.com", "nope")
        assert exc_info.value.code == "INVALID_LOGIN_CREDENTIALS"

    async def test_non_ascii_password_is_rejected_not_crashing(self):
        provider = LocalAuthProvider({"admin@example.com": "secret123"})

        with pytest.raises(AuthError):
            await provider.sign_in("admin@example.com", "pässwörd")

    async def test_non_ascii_password_can_sign_in(self):
        provider = LocalAuthProvider({"admin@example.com": "pässwörd"})

        snapshot = await provider.sign_in("admin@example.com", "pässwörd")

        assert snapshot.authenticated

    async def test_sign_up_then_duplicate(self):
        provider = LocalAuthProvider()

        await provider.sign_up("new@example.com", "secret123")
        await provider.sign_out()

        with pytest.raises(AuthError) as exc_info:
            await provider.sign_up("NEW@example.com", "other")
        assert exc_info.value.code == "EMAIL_EXISTS"
        assert provider.id_token is None
