"""Reconciler — the lifecycle entry points called by the host framework.

The Reconciler wires together the SourceResolver, ContentClassifier,
UploadRouter and DriftDetector against one StorageBackend.

Lifecycle of a managed file::

    Absent --create--> Uploading --> Present
    Present --read--> Present | Absent
    Present --delete--> Absent          (deleting an absent file succeeds)

There is no in-place update: changes to identity-affecting attributes
force the host framework to delete and recreate.  ``update`` exists only
so ``timeout_upload`` can change without touching the backend.

Failures never escape as exceptions: every ``FileForgeError`` is turned
into an error diagnostic on the returned ``Outcome``, and warnings
accumulate next to successful results.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from fileforge.backend.protocol import StorageBackend
from fileforge.config import ProdConfig
from fileforge.core.classifier import ContentClassifier
from fileforge.core.deadline import Deadline
from fileforge.core.drift import DriftDetector
from fileforge.core.errors import FileForgeError, NotFoundError
from fileforge.core.http import HttpClientFactory
from fileforge.core.resolver import SourceResolver, resolve_file_name
from fileforge.core.tempfiles import TempFileFactory
from fileforge.core.upload_router import UploadRouter
from fileforge.models.content import BackendVersion
from fileforge.models.desired import DesiredFile, ObservedFile
from fileforge.models.diagnostics import Diagnostic, Diagnostics, Severity
from fileforge.models.identity import VolumeIdentity, parse_import_id

logger = logging.getLogger(__name__)


class Outcome(BaseModel):
    """Result of one lifecycle call.

    ``observed`` is ``None`` when the file is absent (or the call failed).
    """

    model_config = ConfigDict(frozen=True)

    volume_id: str | None = None
    observed: ObservedFile | None = None
    diagnostics: list[Diagnostic] = []

    @property
    def ok(self) -> bool:
        return not any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]


class Reconciler:
    """Converges one file on a storage backend to its desired state.

    Parameters
    ----------
    backend:
        The storage backend client.
    settings:
        Runtime configuration.  Uses defaults if not provided.
    http:
        HTTP client factory for URL sources.  Built from *settings* if None.
    temp_files:
        Temporary file factory.  Built from *settings* if None.
    """

    def __init__(
        self,
        backend: StorageBackend,
        *,
        settings: ProdConfig | None = None,
        http: HttpClientFactory | None = None,
        temp_files: TempFileFactory | None = None,
    ) -> None:
        self._settings = settings or ProdConfig()
        self._backend = backend
        self._http = http or HttpClientFactory(self._settings.default_min_tls)
        self._temp_files = temp_files or TempFileFactory(self._settings.temp_dir)

        self.resolver = SourceResolver(
            self._temp_files,
            self._http,
            chunk_size=self._settings.download_chunk_size,
        )
        self.router = UploadRouter(backend)
        self.drift = DriftDetector(self._http)

    # ------------------------------------------------------------------
    # Backend capability
    # ------------------------------------------------------------------

    def backend_version(self) -> BackendVersion:
        """Return the backend version, or the configured minimum if unknown."""
        try:
            return self._backend.get_version()
        except Exception as exc:
            fallback = BackendVersion.parse(self._settings.minimum_backend_version)
            logger.warning(
                "failed to determine backend version, assume %s: %s", fallback, exc
            )
            return fallback

    def classifier(self) -> ContentClassifier:
        return ContentClassifier(self.backend_version())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(self, desired: DesiredFile) -> Outcome:
        """Upload the desired file and read back its observed state."""
        diags = Diagnostics()
        deadline = Deadline(desired.timeout_upload)

        try:
            source = desired.source()
            file_name = resolve_file_name(source)
            content_type = self.classifier().classify(file_name, desired.content_type)

            self.router.check_collision(
                desired.node_name,
                desired.datastore_id,
                file_name,
                overwrite=desired.overwrite,
                diagnostics=diags,
            )

            with self.resolver.resolve(source, deadline) as artifact:
                self.router.upload(
                    desired.node_name,
                    desired.datastore_id,
                    content_type,
                    artifact,
                    file_mode=desired.file_mode,
                    diagnostics=diags,
                    deadline=deadline,
                )
        except FileForgeError as exc:
            logger.error("create failed on %s/%s: %s", desired.node_name, desired.datastore_id, exc)
            diags.from_exception(exc)
            return Outcome(diagnostics=list(diags))

        volume = VolumeIdentity(
            datastore_id=desired.datastore_id,
            content_type=content_type,
            file_name=file_name,
        )
        logger.info("Created %s on %s", volume, desired.node_name)

        read = self.read(str(volume), desired)
        diags.extend(Diagnostics(read.diagnostics))
        if read.observed is None and read.ok:
            diags.error(f'failed to read file from "{volume}"')

        return Outcome(
            volume_id=read.volume_id or str(volume),
            observed=read.observed,
            diagnostics=list(diags),
        )

    def read(self, volume_id: str, desired: DesiredFile) -> Outcome:
        """Refresh the observed state of *volume_id*.

        Returns an outcome with ``volume_id=None`` when the file is gone.
        """
        diags = Diagnostics()

        try:
            volume = VolumeIdentity.parse(volume_id)
            listing = self._backend.list_files(desired.node_name, desired.datastore_id)
        except FileForgeError as exc:
            diags.from_exception(exc)
            return Outcome(volume_id=volume_id, diagnostics=list(diags))

        entry = next((f for f in listing if f.volume_id == volume_id), None)
        if entry is None:
            logger.info("%s not found on %s", volume_id, desired.node_name)
            return Outcome(diagnostics=list(diags))

        metadata = desired.recorded_metadata
        changed = False
        if desired.source_file is not None:
            try:
                metadata, changed = self.drift.refresh(
                    desired.source_file,
                    desired.recorded_metadata,
                    Deadline(desired.timeout_upload),
                )
            except FileForgeError as exc:
                diags.from_exception(exc)

        observed = ObservedFile(
            id=volume_id,
            node_name=desired.node_name,
            datastore_id=desired.datastore_id,
            content_type=entry.content_type,
            file_name=volume.file_name,
            file_modification_date=metadata.modification_date,
            file_size=metadata.size,
            file_tag=metadata.tag,
            source_changed=changed,
        )
        return Outcome(volume_id=volume_id, observed=observed, diagnostics=list(diags))

    def update(self, volume_id: str, desired: DesiredFile) -> Outcome:
        """No remote action; only host-side attributes such as the timeout change."""
        logger.debug("update of %s is a no-op (timeout_upload=%d)", volume_id, desired.timeout_upload)
        return Outcome(volume_id=volume_id)

    def delete(self, volume_id: str, desired: DesiredFile) -> Outcome:
        """Delete *volume_id*; an already-absent file counts as deleted."""
        diags = Diagnostics()
        try:
            self._backend.delete_file(desired.node_name, desired.datastore_id, volume_id)
            logger.info("Deleted %s from %s", volume_id, desired.node_name)
        except NotFoundError:
            logger.debug("%s already absent from %s", volume_id, desired.node_name)
        except FileForgeError as exc:
            diags.from_exception(exc)
            return Outcome(volume_id=volume_id, diagnostics=list(diags))
        return Outcome(diagnostics=list(diags))

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    @staticmethod
    def import_state(import_id: str) -> tuple[str, DesiredFile]:
        """Turn ``node/datastore_id:content_type/file_name`` into state.

        Returns ``(volume_id, desired)`` where *desired* carries the node,
        datastore and content type; the source is left unset.
        """
        node, volume = parse_import_id(import_id)
        desired = DesiredFile(
            node_name=node,
            datastore_id=volume.datastore_id,
            content_type=volume.content_type,
        )
        return str(volume), desired
