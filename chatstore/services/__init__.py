"""
Service layer around the migration core: live-file tracking and bundle I/O.
"""

from chatstore.services.live_files import LiveFileRegistry
from chatstore.services.bundle_service import BundleImportResult, load_bundle, dump_bundle

__all__ = [
    'LiveFileRegistry',
    'BundleImportResult',
    'load_bundle',
    'dump_bundle',
]
