"""Fileforge: declarative reconciliation of files on cluster storage.

Converges a single remote file artifact (ISO image, container template,
backup, snippet or disk image) on a storage backend to a desired state:
  - Stable ``datastore:content_type/file_name`` volume identities
  - Local path, URL or inline raw sources with SHA-256 verification
  - Content-type inference from file extensions and backend capability
  - API upload or streaming upload routed by content type
  - Drift detection for sources that live outside the backend
"""

__version__ = "0.1.0"
__description__ = "Declarative reconciler for files on cluster storage backends"

from fileforge.core.reconciler import Reconciler
from fileforge.cli.app import app as cli

__all__ = ["Reconciler", "cli", "__version__"]
