"""
Open-IDE - workspace and execution core for a self-modifying code editor.

A virtual file workspace, multi-tab editor session, plugin registry and a
sandboxed script runner with a hot reload cycle that re-runs marked scripts.
"""

from openide.config import IDESettings
from openide.core.models import EditorTab, ExecutionRecord, FileNode, Plugin, ReloadReport
from openide.session import IDESession

__version__ = "0.1.0"
__all__ = ["IDESession", "IDESettings", "EditorTab", "ExecutionRecord", "FileNode", "Plugin", "ReloadReport"]
