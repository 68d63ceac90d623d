"""
component_report/integrations package marker.
"""

from component_report.integrations.notion_mirror import MirrorError, MirrorOutcome, NotionMirror

__all__ = ["MirrorError", "MirrorOutcome", "NotionMirror"]
