"""Data models for Drive listings and diagnostic probes."""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class FileSummary(BaseModel):
    """A Drive file as returned to callers."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    modified_time: Optional[str] = Field(default=None, alias="modifiedTime")
    mime_type: Optional[str] = Field(default=None, alias="mimeType")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ProbeResult(BaseModel):
    """Outcome of one diagnostic query variant."""

    model_config = ConfigDict(populate_by_name=True)

    variant: str
    query: Optional[str] = None
    all_drives: bool = Field(default=False, alias="allDrives")
    files: Optional[list[FileSummary]] = None
    error: Optional[str] = None

    @property
    def file_count(self) -> int:
        return len(self.files or [])

    def to_wire(self) -> dict:
        body: dict[str, Any] = {
            "variant": self.variant,
            "query": self.query,
            "allDrives": self.all_drives,
        }
        if self.error is not None:
            body["error"] = self.error
        else:
            body["fileCount"] = self.file_count
            body["files"] = [f.to_wire() for f in self.files or []]
        return body


class DiagnosticReport(BaseModel):
    """Advisory bundle for a folder listing; never an authoritative answer."""

    folder_id: str
    files: list[FileSummary] = Field(default_factory=list)
    probes: list[ProbeResult] = Field(default_factory=list)

    def to_wire(self) -> dict:
        return {
            "folderId": self.folder_id,
            "advisory": True,
            "fileCount": len(self.files),
            "files": [f.to_wire() for f in self.files],
            "probes": [p.to_wire() for p in self.probes],
        }
