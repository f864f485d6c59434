"""
Core managers and controllers for the SchoolWise GUI.
"""
from .filter_cascade import FilterCascade
from .report_workflow import ReportWorkflow, build_report_filename
from .state_manager import AppState, StateManager
from .status_manager import StatusManager

__all__ = [
    'AppState',
    'FilterCascade',
    'ReportWorkflow',
    'StateManager',
    'StatusManager',
    'build_report_filename',
]
