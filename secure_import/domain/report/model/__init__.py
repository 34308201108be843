from secure_import.domain.report.model.report import Report, ReportMetadata, ReportSummary

__all__ = ["Report", "ReportMetadata", "ReportSummary"]
