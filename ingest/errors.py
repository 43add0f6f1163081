from __future__ import annotations


class ReportIngestError(Exception):
    """Base for failures that reject a whole uploaded report."""

    status_code = 500


class ReportSchemaError(ReportIngestError):
    """Mandatory header or structure missing; nothing has been mutated."""

    status_code = 400


class ReportReadError(ReportIngestError):
    """The uploaded file could not be opened or decoded as a spreadsheet."""

    status_code = 500
