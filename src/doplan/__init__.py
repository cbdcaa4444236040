"""Plan progress tracking: scan a plan tree, roll up task state, recommend the next task."""

__version__ = "0.1.0"
