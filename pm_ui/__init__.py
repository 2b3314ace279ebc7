"""Command-line and full-screen interface for pmgr."""
