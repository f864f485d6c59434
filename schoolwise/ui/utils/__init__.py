"""
Utility modules for the GUI
"""
from .error_boundary import safe_ui_update, with_error_boundary
from .loading_states import LoadingState

__all__ = ['LoadingState', 'safe_ui_update', 'with_error_boundary']
