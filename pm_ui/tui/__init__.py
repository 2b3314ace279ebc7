"""
UI adapter package providing Rich/prompt_toolkit and headless renderers.
"""

from pm_ui.tui.system.protocols import UI, Form, Presenter, Progress, Selector, TablePresenter
from pm_ui.tui.system.facade import TUI
from pm_ui.tui.system.headless import HeadlessUI

__all__ = [
    "UI",
    "TUI",
    "HeadlessUI",
    "Form",
    "Selector",
    "TablePresenter",
    "Presenter",
    "Progress",
]
