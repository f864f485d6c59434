"""
GUI Module for the SchoolWise report client
===========================================

This module provides the filter panel implemented with Flet.

The GUI is organized into:
- core: state, filter cascade, report workflow and status managers
- utils: error boundaries and loading indicators
"""

from .main_gui import SchoolWiseGUI

__all__ = ['SchoolWiseGUI']
