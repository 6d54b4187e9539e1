"""Google Drive and Sheets API integration."""

from .client import WorkspaceClient
from .credentials import Capability, CredentialProvider
from .models import DiagnosticReport, FileSummary, ProbeResult

__all__ = [
    "WorkspaceClient",
    "Capability",
    "CredentialProvider",
    "DiagnosticReport",
    "FileSummary",
    "ProbeResult",
]
