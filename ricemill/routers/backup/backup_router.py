from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from ricemill.core.store import get_store
from ricemill.utils.response import APIResponse, success_response

from ricemill.schemas.backup.backup_schemas import ImportReport, StorageInfo

from ricemill.services.storage.backup_service import (
    clear_all,
    export_all,
    import_all,
    storage_info,
)

router = APIRouter(
    prefix="/backup",
    tags=["Backup"],
)


@router.get("/export")
def export_all_api(store=Depends(get_store)):
    # raw document, so the file can be re-imported as-is
    return export_all(store)


@router.post("/import", response_model=APIResponse[ImportReport])
def import_all_api(
    document: Any = Body(...),
    store=Depends(get_store),
):
    report = import_all(store, document)
    return success_response("Data imported successfully", report)


@router.get("/info", response_model=APIResponse[StorageInfo])
def storage_info_api(store=Depends(get_store)):
    return success_response("Storage info fetched", storage_info(store))


@router.delete("/", response_model=APIResponse[Dict[str, List[str]]])
def clear_all_api(store=Depends(get_store)):
    cleared = clear_all(store)
    return success_response("All data cleared", {"cleared": cleared})
