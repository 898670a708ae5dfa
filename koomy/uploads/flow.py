"""Presigned-URL image and logo uploads.

Three steps: ask the API for an upload slot, PUT the bytes straight to
object storage, then finalize to get the stable object path. Files are
checked locally first; a rejected file never reaches the network. Any
failing step aborts the whole flow, drops the local preview and reports a
user-facing error. An object written before a failed finalize is left to
the backend.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import structlog

from koomy.config.settings import MAX_UPLOAD_BYTES, get_settings
from koomy.exceptions import ApiError, UploadError, UploadValidationError
from koomy.types import UploadKind

if TYPE_CHECKING:
    from koomy.api.client import ApiClient

logger = structlog.get_logger(__name__)

DEFAULT_IMAGE_FOLDER = "news"

MSG_NOT_AN_IMAGE = "Veuillez sélectionner une image"
MSG_TOO_LARGE = "L'image ne doit pas dépasser 5 Mo"
MSG_SLOT_FAILED = "Impossible d'obtenir l'URL d'upload"
MSG_PUT_FAILED = "Échec de l'upload"
MSG_FINALIZE_FAILED = "Échec de la finalisation"
MSG_UPLOAD_ERROR = "Erreur lors de l'upload de l'image"
MSG_UPLOAD_OK = "Image uploadée avec succès"


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LogNotifier:
    """Default notifier: user-facing messages go to the log."""

    def success(self, message: str) -> None:
        logger.info("notify_success", message=message)

    def error(self, message: str) -> None:
        logger.warning("notify_error", message=message)


@dataclass(frozen=True, slots=True)
class UploadFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def validate_upload(file: UploadFile, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """Raise ``UploadValidationError`` unless ``file`` is an image within the size cap."""
    if not file.content_type.startswith("image/"):
        raise UploadValidationError(MSG_NOT_AN_IMAGE)
    if file.size > max_bytes:
        raise UploadValidationError(MSG_TOO_LARGE)


class UploadFlow:
    """Runs one upload kind (``image`` or ``logo``) end to end.

    ``preview`` holds the file being uploaded until the flow settles; it is
    cleared on failure and kept on success.
    """

    def __init__(
        self,
        api: ApiClient,
        kind: UploadKind = UploadKind.IMAGE,
        *,
        folder: str | None = DEFAULT_IMAGE_FOLDER,
        notifier: Notifier | None = None,
        max_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        self._api = api
        self._kind = kind
        # Logo slots take no body at all.
        self._folder = folder if kind == UploadKind.IMAGE else None
        self._notifier = notifier or LogNotifier()
        self._max_bytes = max_bytes
        self.is_uploading = False
        self.preview: UploadFile | None = None

    @classmethod
    def from_settings(
        cls,
        api: ApiClient,
        kind: UploadKind = UploadKind.IMAGE,
        *,
        folder: str | None = DEFAULT_IMAGE_FOLDER,
        notifier: Notifier | None = None,
    ) -> UploadFlow:
        return cls(
            api, kind, folder=folder, notifier=notifier, max_bytes=get_settings().upload_max_bytes
        )

    async def upload(
        self, file: UploadFile, on_complete: Callable[[str], None] | None = None
    ) -> str | None:
        """Upload ``file`` and return its object path, or None on any failure.

        ``on_complete`` receives the object path only after finalize succeeds.
        """
        try:
            validate_upload(file, self._max_bytes)
        except UploadValidationError as exc:
            logger.info(
                "upload_rejected",
                kind=self._kind,
                filename=file.filename,
                content_type=file.content_type,
                size=file.size,
                reason=str(exc),
            )
            self._notifier.error(str(exc))
            return None

        self.preview = file
        self.is_uploading = True
        try:
            object_path = await self._run(file)
        except UploadError as exc:
            logger.warning("upload_failed", kind=self._kind, filename=file.filename, step=str(exc))
            self.preview = None
            self._notifier.error(MSG_UPLOAD_ERROR)
            return None
        finally:
            self.is_uploading = False

        if on_complete is not None:
            on_complete(object_path)
        logger.info("upload_completed", kind=self._kind, object_path=object_path)
        self._notifier.success(MSG_UPLOAD_OK)
        return object_path

    async def _run(self, file: UploadFile) -> str:
        try:
            slot = await self._api.uploads.request_slot(self._kind, self._folder)
        except ApiError as exc:
            raise UploadError(MSG_SLOT_FAILED) from exc

        try:
            await self._api.put_bytes(slot.upload_url, file.data, file.content_type)
        except ApiError as exc:
            raise UploadError(MSG_PUT_FAILED) from exc

        try:
            finalized = await self._api.uploads.finalize(self._kind, slot.upload_url)
        except ApiError as exc:
            raise UploadError(MSG_FINALIZE_FAILED) from exc

        return finalized.object_path
