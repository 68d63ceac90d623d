"""
component_report/writers package marker.
"""

from component_report.writers.csv_writer import CSV_COLUMNS, CSVReportWriter
from component_report.writers.markdown_writer import MarkdownReportWriter

__all__ = ["CSV_COLUMNS", "CSVReportWriter", "MarkdownReportWriter"]
