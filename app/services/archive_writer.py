"""
app/services/archive_writer.py

Archives raw import payloads in the storage service before they are processed.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from app.connectors.storage_client import StorageServiceClient
from app.domain.customer import StorageMetadata
from app.errors import FatalPipelineError
from app.failure_codes import ARCHIVAL_FAILED

logger = logging.getLogger(__name__)

# Returned by the storage service when the drawer is already there.
_DRAWER_EXISTS_STATUSES = {400, 409}


class ArchiveWriter:
    """
    Writes one verbatim copy of an import payload per call.
    """

    def __init__(
        self,
        *,
        client: StorageServiceClient,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._client = client
        self._id_factory = id_factory

    def archive(self, payload: str) -> StorageMetadata:
        """
        Store ``payload`` under a fresh node id or raise FatalPipelineError.
        """

        try:
            self._ensure_drawer()
            node_id = self._id_factory()
            name = f"csv-import-{node_id}"
            result = self._client.create_node(node_id, name, payload.encode("utf-8"))
        except FatalPipelineError:
            raise
        except Exception as exc:
            logger.exception("Archival raised drawer=%s", self._client.drawer)
            raise FatalPipelineError(
                code=ARCHIVAL_FAILED,
                detail=f"Unable to archive the import payload: {exc}",
            ) from exc

        if not result.is_success or not isinstance(result.value, StorageMetadata):
            logger.error(
                "Archival failed drawer=%s status=%s circuit_open=%s detail=%s",
                self._client.drawer,
                result.status,
                result.circuit_open,
                result.details,
            )
            raise FatalPipelineError(
                code=ARCHIVAL_FAILED,
                detail=f"Unable to archive the import payload: {result.details or 'unknown error'}",
                status=result.status if not result.is_success else 502,
            )

        logger.info(
            "Import payload archived drawer=%s node_id=%s size=%s",
            result.value.drawer,
            result.value.id,
            result.value.size,
        )
        return result.value

    def _ensure_drawer(self) -> None:
        result = self._client.create_drawer()
        if result.is_success or result.status in _DRAWER_EXISTS_STATUSES:
            return
        raise FatalPipelineError(
            code=ARCHIVAL_FAILED,
            detail=f"Unable to prepare storage drawer '{self._client.drawer}': {result.details}",
            status=result.status,
        )
