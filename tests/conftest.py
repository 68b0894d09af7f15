"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database session, Filecoin settings, local storage ledger,
signer providers, a fake image client and the storage-facing services
Dependencies: pytest, sqlalchemy, eth_account
System role: Test infrastructure and fixture management
"""

import pytest
from eth_account import Account
from tenacity import wait_none

from base0.boundary.storage.factory import StorageBackendFactory
from base0.boundary.storage.local_backend import LocalLedger
from base0.configs.filecoin import FilecoinSettings
from base0.core.signer import StaticSignerProvider
from base0.models.generation import GeneratedImageResult

WALLET = "0x1111111111111111111111111111111111111111"
OTHER_WALLET = "0x2222222222222222222222222222222222222222"


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from base0.boundary.db.base import Base
    from base0.boundary.db.create_tables import create_all_tables

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all_tables(engine)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def wallet() -> str:
    return WALLET


@pytest.fixture
def filecoin_settings() -> FilecoinSettings:
    """Local backends, in-memory registry, no keys."""
    return FilecoinSettings(
        storage_backend="local",
        registry_backend="memory",
        wallet_private_key=None,
        deployer_private_key=None,
        signer_retry_attempts=3,
        signer_retry_delay_seconds=0,
    )


@pytest.fixture
def ledger() -> LocalLedger:
    return LocalLedger()


@pytest.fixture
def backends(filecoin_settings: FilecoinSettings, ledger: LocalLedger) -> StorageBackendFactory:
    return StorageBackendFactory(filecoin_settings, ledger=ledger)


@pytest.fixture
def signers() -> StaticSignerProvider:
    """Signer provider that always has an account ready."""
    return StaticSignerProvider(Account.create())


@pytest.fixture
def no_wait():
    """tenacity wait strategy that never sleeps."""
    return wait_none()


class FakeImageClient:
    """ImageClient double recording every call."""

    provider = "fake"

    def __init__(self, image_url: str = "https://images.example/out.png", error: Exception | None = None):
        self.image_url = image_url
        self.error = error
        self.calls = []

    async def generate(self, params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return GeneratedImageResult(
            image_url=self.image_url,
            id=f"deepai-{len(self.calls)}",
            share_url="https://deepai.org/share/1",
        )


@pytest.fixture
def image_client() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture
def image_client_factory():
    """Build FakeImageClient instances with a custom URL or error."""
    return FakeImageClient


@pytest.fixture
def history_service(test_async_db):
    from base0.application.services.history_service import HistoryService

    return HistoryService(test_async_db)


@pytest.fixture
def balance_service(backends, filecoin_settings):
    from base0.application.services.balance_service import BalanceService

    return BalanceService(backends, filecoin_settings)


@pytest.fixture
def payment_service(backends, signers, filecoin_settings, no_wait):
    from base0.application.services.payment_service import PaymentService

    return PaymentService(backends, signers, filecoin_settings, signer_wait=no_wait)


@pytest.fixture
def prompt_store(backends, signers, history_service, filecoin_settings, no_wait):
    from base0.application.services.filecoin_prompt_store import FilecoinPromptStore

    return FilecoinPromptStore(backends, signers, history_service, filecoin_settings, signer_wait=no_wait)
