from datetime import datetime, timezone
import logging

from ricemill.constants.collections import (
    BACKUP_VERSION,
    EXPORT_COLLECTIONS,
)
from ricemill.core.exceptions import InvalidBackupError
from ricemill.schemas.backup.backup_schemas import ImportReport, StorageInfo
from ricemill.services.storage.collection_store import CollectionStore, transactional
from ricemill.services.storage.record_upgrade import upgrade_collection

logger = logging.getLogger(__name__)


# =====================================================
# EXPORT
# =====================================================
def export_all(store: CollectionStore, now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)

    document = {key: store.load(key) for key in EXPORT_COLLECTIONS}
    document["exportDate"] = now.isoformat()
    document["version"] = BACKUP_VERSION

    logger.info(
        "Data exported",
        extra={"records": sum(len(document[k]) for k in EXPORT_COLLECTIONS)},
    )
    return document


# =====================================================
# IMPORT
# =====================================================
def _validate(document) -> dict[str, list[dict]]:
    """Check the envelope and upgrade every record; nothing is written here."""
    if not isinstance(document, dict):
        raise InvalidBackupError("Backup must be a JSON object")

    if not document.get("version") or not document.get("exportDate"):
        raise InvalidBackupError("Invalid backup file format: missing version or exportDate")

    collections = {}
    for key in EXPORT_COLLECTIONS:
        if key not in document or document[key] is None:
            continue
        records = document[key]
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise InvalidBackupError(f"Collection {key} must be a list of records")
        collections[key] = upgrade_collection(key, records)
    return collections


@transactional
def import_all(store: CollectionStore, document) -> ImportReport:
    """Validate the whole document first, then write it in one transaction.

    Collections absent from the document are left untouched.
    """
    collections = _validate(document)

    report = ImportReport(
        version=str(document["version"]),
        export_date=str(document["exportDate"]),
    )

    for key in EXPORT_COLLECTIONS:
        records = collections.get(key)
        if records is None:
            report.skipped.append(key)
            continue
        store.save(key, records)
        report.imported[key] = len(records)

    ignored = set(document) - set(EXPORT_COLLECTIONS) - {"version", "exportDate"}
    if ignored:
        logger.warning("Unknown backup keys ignored", extra={"keys": sorted(ignored)})

    logger.info(
        "Data imported",
        extra={"version": report.version, "collections": len(report.imported)},
    )
    return report


# =====================================================
# MAINTENANCE
# =====================================================
@transactional
def clear_all(store: CollectionStore) -> list[str]:
    keys = store.keys()
    for key in keys:
        store.delete(key)

    logger.warning("All collections cleared", extra={"collections": len(keys)})
    return keys


def storage_info(store: CollectionStore) -> StorageInfo:
    counts = {key: len(store.load(key)) for key in store.keys()}
    return StorageInfo(
        collections=counts,
        total_records=sum(counts.values()),
        last_sync=store.last_sync(),
    )
