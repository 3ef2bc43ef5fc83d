from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ImportReport(BaseModel):
    version: str
    export_date: str
    imported: Dict[str, int] = Field(default_factory=dict)
    skipped: List[str] = Field(default_factory=list)


class StorageInfo(BaseModel):
    collections: Dict[str, int] = Field(default_factory=dict)
    total_records: int = 0
    last_sync: Optional[datetime] = None
