"""Input exceptions: graph documents and metric tables."""

from typing import Optional

from .base import ArchgateError


class MalformedInputError(ArchgateError):
    """Raised when an input document is inconsistent or has the wrong shape.

    Always fatal for the run: metrics over an inconsistent graph would be
    misleading, so no partial report is produced.
    """

    def __init__(self, reason: str, entity: Optional[str] = None, remediation: Optional[str] = None):
        details = {"reason": reason}
        if entity is not None:
            details["entity"] = entity
        if remediation is not None:
            details["remediation"] = remediation
        super().__init__(f"Malformed input: {reason}", details=details)
        self.reason = reason
        self.entity = entity
        self.remediation = remediation


class UnknownModuleError(MalformedInputError):
    """Raised when an edge points at a module id absent from the graph."""

    def __init__(self, source: str, target: str):
        super().__init__(
            f"edge {source} -> {target} references an unknown module",
            entity=f"{source} -> {target}",
            remediation="fix the edge in the graph producer or add the missing module",
        )
        self.source = source
        self.target = target
