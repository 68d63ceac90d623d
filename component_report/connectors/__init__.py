"""
component_report/connectors package marker.
"""

from component_report.connectors.base import BaseConnector, ConnectorRequestError
from component_report.connectors.figma_connector import FigmaConnector
from component_report.connectors.pagination import Page, iter_pages

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "FigmaConnector",
    "Page",
    "iter_pages",
]
