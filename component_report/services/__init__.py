"""
component_report/services package marker.
"""
