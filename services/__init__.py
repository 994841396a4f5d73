# Lockdiff v1.0.0
"""
Services package for lockdiff.
Contains git access, rendering and lockfile watching.
"""
from services.git import GitClient, GitError
from services.render import render_hunks, render_text, make_console, print_result
from services.watcher import LockfileWatcher, LockfileHandler

__all__ = [
    "GitClient",
    "GitError",
    "render_hunks",
    "render_text",
    "make_console",
    "print_result",
    "LockfileWatcher",
    "LockfileHandler"
]
