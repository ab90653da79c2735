"""
byteview - paginated byte viewer
"""

from .__version__ import __version__
from .core import DataTypeMode, ProgressSignal, RenderResult, ViewCoordinator

__all__ = ["__version__", "DataTypeMode", "ProgressSignal", "RenderResult", "ViewCoordinator"]
