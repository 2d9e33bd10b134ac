"""Application service container.

Everything the routes need (database, storage, model client, email, task
runner) is built once per app and reached through ``app.state.services``.
"""

import uuid
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from backend.app.config import Settings
from backend.app.db.engine import create_async_engine_from_settings, create_session_factory
from backend.app.extraction.tasks import ExtractionTaskRunner
from backend.app.extraction.worker import process_document
from backend.app.llm.client import ExtractionClient, get_extraction_client
from backend.app.models.drafts import ContractDraft, InvoiceDraft
from backend.app.notifications.email import DisabledEmailSender, EmailSender, ResendEmailSender
from backend.app.storage.local import LocalObjectStore
from backend.app.storage.signing import UrlSigner
from backend.app.storage.store import ObjectStore


@dataclass
class AppServices:
    """Long-lived collaborators shared by all requests."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    storage: ObjectStore
    signer: UrlSigner
    extraction_client: ExtractionClient
    email_sender: EmailSender
    task_runner: ExtractionTaskRunner = field(init=False)

    def __post_init__(self) -> None:
        self.task_runner = ExtractionTaskRunner(self.process_document)

    async def process_document(self, document_id: uuid.UUID) -> InvoiceDraft | ContractDraft:
        """Run the extraction worker with this container's collaborators."""
        return await process_document(
            document_id,
            session_factory=self.session_factory,
            storage=self.storage,
            client=self.extraction_client,
        )

    async def aclose(self) -> None:
        """Wait for running extractions and release the connection pool."""
        await self.task_runner.drain()
        await self.engine.dispose()


def build_email_sender(settings: Settings) -> EmailSender:
    """Resend sender when an API key is configured, otherwise a logging no-op."""
    if settings.resend_api_key and settings.resend_api_key.get_secret_value():
        return ResendEmailSender(
            api_key=settings.resend_api_key.get_secret_value(),
            sender=settings.reminder_email_from,
            recipient=settings.reminder_email_to,
            api_url=settings.resend_api_url,
        )
    return DisabledEmailSender()


def build_services(settings: Settings) -> AppServices:
    """Wire production collaborators from settings."""
    engine = create_async_engine_from_settings(settings)
    return AppServices(
        settings=settings,
        engine=engine,
        session_factory=create_session_factory(engine),
        storage=LocalObjectStore(settings.storage_root),
        signer=UrlSigner(
            settings.storage_signing_secret.get_secret_value(),
            ttl_seconds=settings.signed_url_ttl_seconds,
        ),
        extraction_client=get_extraction_client(settings),
        email_sender=build_email_sender(settings),
    )
