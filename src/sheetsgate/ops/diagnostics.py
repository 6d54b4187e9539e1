"""Advisory probing of folder listings that come back empty.

An empty folder listing usually means one of: the service account was never
shared on the folder, the files are in a shared drive, or everything is in
the trash. Each probe variant below isolates one of those causes. The report
labels every sub-result with the query that produced it; none of them is an
authoritative listing.
"""

import logging
from dataclasses import dataclass

from ..errors import UpstreamError
from ..sheets.client import WorkspaceClient, quote_query_literal
from ..sheets.models import DiagnosticReport, FileSummary, ProbeResult

logger = logging.getLogger(__name__)

SUPERSET_FIELDS = "files(id, name, modifiedTime, mimeType, parents)"


@dataclass(frozen=True)
class ProbeVariant:
    """One alternative listing query."""

    name: str
    include_trashed: bool = False
    all_drives: bool = False
    # List without a query and keep files whose parents contain the folder.
    local_parent_filter: bool = False

    def query(self, folder_id: str):
        if self.local_parent_filter:
            return None
        query = f"{quote_query_literal(folder_id)} in parents"
        if not self.include_trashed:
            query += " and trashed = false"
        return query


PROBE_VARIANTS = (
    ProbeVariant("parent-not-trashed"),
    ProbeVariant("parent-any", include_trashed=True),
    ProbeVariant("parent-not-trashed-all-drives", all_drives=True),
    ProbeVariant("parent-any-all-drives", include_trashed=True, all_drives=True),
    ProbeVariant("unfiltered-superset", local_parent_filter=True),
)


class FolderProber:
    """Builds a DiagnosticReport for a folder."""

    def __init__(self, client: WorkspaceClient, list_page_size: int = 100, probe_page_size: int = 1000):
        self.client = client
        self.list_page_size = list_page_size
        self.probe_page_size = probe_page_size

    def probe(self, folder_id: str) -> DiagnosticReport:
        """List the folder; if nothing comes back, run every probe variant."""
        files = self.client.list_folder(folder_id, page_size=self.list_page_size)
        report = DiagnosticReport(
            folder_id=folder_id,
            files=[FileSummary.model_validate(f) for f in files],
        )
        if files:
            return report

        logger.info(f"Folder {folder_id} listed empty; running {len(PROBE_VARIANTS)} probes")
        report.probes = [self._run(variant, folder_id) for variant in PROBE_VARIANTS]
        return report

    def _run(self, variant: ProbeVariant, folder_id: str) -> ProbeResult:
        query = variant.query(folder_id)
        result = ProbeResult(variant=variant.name, query=query, all_drives=variant.all_drives)
        try:
            if variant.local_parent_filter:
                files = self.client.list_files(
                    None,
                    page_size=self.probe_page_size,
                    fields=SUPERSET_FIELDS,
                    all_drives=variant.all_drives,
                )
                files = [f for f in files if folder_id in f.get("parents", [])]
            else:
                files = self.client.list_files(
                    query,
                    page_size=self.probe_page_size,
                    all_drives=variant.all_drives,
                )
        except UpstreamError as e:
            # Reported per variant; the remaining probes still run.
            logger.warning(f"Probe {variant.name} for folder {folder_id} failed: {e.message}")
            result.error = e.message
            return result

        result.files = [FileSummary.model_validate(f) for f in files]
        logger.debug(f"Probe {variant.name} found {result.file_count} file(s)")
        return result
