from fastapi import APIRouter, Depends

from ricemill.core.store import get_store
from ricemill.schemas.references.reference_schemas import ReferenceReport
from ricemill.services.references.reference_index import reference_report
from ricemill.utils.response import APIResponse, success_response

router = APIRouter(
    prefix="/references",
    tags=["References"],
)


@router.get("/report", response_model=APIResponse[ReferenceReport])
def reference_report_api(store=Depends(get_store)):
    return success_response("Reference report generated", reference_report(store))
