# filedrop/services/upload_orchestrator.py
from pathlib import Path
from typing import AsyncIterable, Optional

import anyio

from filedrop.core.logging_config import logger
from filedrop.core.settings import Settings
from filedrop.domain.uploads import FilePart, OutcomeKind, SavedFile, UploadOutcome
from filedrop.services.errors import FileCreateError, FileWriteError
from filedrop.services.naming import build_stored_name
from filedrop.services.sanitizer import sanitize
from filedrop.services.stream_writer import StreamWriter, write_stream


class UploadOrchestrator:
    """
    Verwerkt één multipart upload: namen sanitizen, per bestandsdeel een
    unieke naam afleiden en wegschrijven, alles binnen één deadline.

    Fail-fast: de eerste schrijffout breekt het hele request af. Eerder
    weggeschreven bestanden blijven op disk staan (geen rollback).
    """

    def __init__(
        self,
        uploads_dir: Path,
        timeout_seconds: float,
        writer: Optional[StreamWriter] = None,
    ):
        self.uploads_dir = Path(uploads_dir)
        self.timeout_seconds = timeout_seconds
        self.writer = writer or write_stream

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadOrchestrator":
        return cls(settings.UPLOADS_DIR, settings.UPLOAD_TIMEOUT_SECONDS)

    async def handle_upload(
        self,
        identifier: str,
        category: str,
        parts: AsyncIterable[FilePart],
    ) -> UploadOutcome:
        try:
            with anyio.fail_after(self.timeout_seconds):
                return await self._process(identifier, category, parts)
        except TimeoutError:
            logger.warning(
                "upload_timed_out",
                identifier=identifier,
                category=category,
                timeout_seconds=self.timeout_seconds,
            )
            return UploadOutcome.failure(OutcomeKind.TIMED_OUT)

    async def _process(
        self,
        identifier: str,
        category: str,
        parts: AsyncIterable[FilePart],
    ) -> UploadOutcome:
        safe_identifier = sanitize(identifier)
        safe_category = sanitize(category)

        try:
            await anyio.Path(self.uploads_dir).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(
                "uploads_dir_unavailable", path=str(self.uploads_dir), error=str(e)
            )
            return UploadOutcome.failure(OutcomeKind.DIRECTORY_UNAVAILABLE, str(e))

        saved: list[SavedFile] = []
        async for part in parts:
            if not part.declared_name:
                continue  # gewoon formulierveld

            stored_name = build_stored_name(
                sanitize(part.declared_name), safe_identifier, safe_category
            )
            target = self.uploads_dir / stored_name

            try:
                size = await self.writer(target, part.chunks)
            except FileCreateError as e:
                logger.error("upload_create_failed", path=str(target), error=str(e))
                return UploadOutcome.failure(OutcomeKind.CREATE_FAILED, str(e))
            except FileWriteError as e:
                logger.error(
                    "upload_write_failed",
                    path=str(target),
                    error=str(e),
                    already_saved=len(saved),
                )
                return UploadOutcome.failure(OutcomeKind.WRITE_FAILED, str(e))

            logger.info(
                "upload_saved",
                stored_name=stored_name,
                declared_name=part.declared_name,
                size=size,
            )
            saved.append(SavedFile(stored_name=stored_name, size=size))

        if not saved:
            return UploadOutcome.failure(OutcomeKind.NO_FILES)
        return UploadOutcome.success(saved)
