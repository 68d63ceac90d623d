"""
component_report/schemas package marker.
"""
