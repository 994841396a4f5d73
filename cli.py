# Lockdiff v1.0.0
#!/usr/bin/env python3
"""
Lockdiff CLI

Command-line interface for diffing npm lockfiles between files or git
revisions.
"""
import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from config import settings
from core import (
    diff_documents,
    parse_lockfile_content,
    parse_lockfile_file,
    DiffResult,
    LockdiffError,
    ParsedLockfile
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DIFFERENCES = 1
EXIT_ERROR = 2


def compare_files(before_path: str, after_path: str, console) -> DiffResult:
    """Compare two lockfiles on disk and print differences."""
    from services.render import print_result

    before = parse_lockfile_file(before_path)
    after = parse_lockfile_file(after_path)

    result = diff_documents(before.document, after.document, settings.DEFAULT_REGISTRY_HOST)
    print_result(result, console)
    return result


def _absent(source: str) -> ParsedLockfile:
    """Stand-in for a lockfile that does not exist on one side."""
    logger.info(f"{source} does not exist, comparing against an empty lockfile")
    return ParsedLockfile(document={"packages": {}}, source=f"{source} (absent)")


def compare_git(
    console,
    rev_a: str = "HEAD",
    rev_b: Optional[str] = None,
    lockfile: Optional[str] = None,
    all_lockfiles: bool = False
) -> list[DiffResult]:
    """
    Compare a lockfile between two revisions, or a revision and the
    working tree when rev_b is None.

    A lockfile added or deleted between the two sides is compared against
    an empty one.
    """
    from services.git import GitClient
    from services.render import print_result

    git = GitClient()

    if all_lockfiles:
        root = git.toplevel()
        git = GitClient(cwd=root)
        entries = git.changed_lockfiles(rev_a, rev_b=rev_b)
        if not entries:
            console.print("No changed lockfiles")
            return []
    else:
        root = None
        path = lockfile or settings.LOCKFILE_NAME
        if rev_b is None and rev_a == "HEAD" and not git.is_modified(path):
            logger.info(f"{path} is unmodified, skipping")
            console.print(f"{path}: no changes")
            return []
        status = git.file_status(path, rev_a, rev_b)
        if status is None and rev_b is None and git.is_untracked(path):
            # untracked files never show up in git diff
            status = "A"
        entries = [(status, path)]

    results = []
    for status, path in entries:
        if status == "A":
            before = _absent(f"{rev_a}:{path}")
        else:
            before = parse_lockfile_content(git.show(rev_a, path), f"{rev_a}:{path}")

        if rev_b is None:
            working_path = Path(root, path) if root else Path(path)
            if status == "D" and not working_path.exists():
                after = _absent(str(working_path))
            else:
                after = parse_lockfile_file(working_path)
        elif status == "D":
            after = _absent(f"{rev_b}:{path}")
        else:
            after = parse_lockfile_content(git.show(rev_b, path), f"{rev_b}:{path}")

        result = diff_documents(before.document, after.document, settings.DEFAULT_REGISTRY_HOST)
        title = f"{before.source} -> {after.source}" if len(entries) > 1 else None
        print_result(result, console, title=title)
        results.append(result)

    return results


def watch_lockfile(console, lockfile: Optional[str] = None, rev: Optional[str] = None):
    """Print a fresh diff every time the lockfile is rewritten."""
    from services.watcher import LockfileWatcher
    from services.render import print_result

    path = lockfile or settings.LOCKFILE_NAME

    if rev:
        from services.git import GitClient
        baseline = parse_lockfile_content(GitClient().show(rev, path), f"{rev}:{path}")
    else:
        baseline = parse_lockfile_file(path)

    def on_change(parsed):
        try:
            result = diff_documents(baseline.document, parsed.document, settings.DEFAULT_REGISTRY_HOST)
        except LockdiffError as e:
            console.print(f"error: {e}")
            return
        print_result(result, console, title=f"{baseline.source} -> {parsed.source}")

    console.print(f"Watching {path} against {baseline.source}")
    console.print("Press Ctrl+C to stop\n")

    watcher = LockfileWatcher(path, on_change)
    watcher.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        console.print("\nStopping watcher...")
        watcher.stop()


def run_server(host: str = "127.0.0.1", port: int = 8000, reload: bool = False):
    """Run the FastAPI server."""
    import uvicorn
    uvicorn.run("api.main:app", host=host, port=port, reload=reload)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lockdiff",
        description="Semantic diffs for npm package-lock.json files",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default=None,
        help=f"Colorize output (default: {settings.COLOR})"
    )
    parser.add_argument(
        "--exit-code",
        action="store_true",
        help="Exit with status 1 when differences are found"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # compare
    compare_parser = subparsers.add_parser("compare", help="Compare two lockfiles")
    compare_parser.add_argument("before", help="Old lockfile")
    compare_parser.add_argument("after", help="New lockfile")

    # git
    git_parser = subparsers.add_parser("git", help="Compare a lockfile across git revisions")
    git_parser.add_argument("rev_a", nargs="?", default="HEAD", help="Old revision (default: HEAD)")
    git_parser.add_argument("rev_b", nargs="?", help="New revision (default: working tree)")
    git_parser.add_argument("--file", help=f"Lockfile path (default: {settings.LOCKFILE_NAME})")
    git_parser.add_argument("--all", action="store_true", help="Compare every changed lockfile")

    # watch
    watch_parser = subparsers.add_parser("watch", help="Re-diff the lockfile whenever it changes")
    watch_parser.add_argument("--file", help=f"Lockfile path (default: {settings.LOCKFILE_NAME})")
    watch_parser.add_argument("--rev", help="Compare against this git revision instead of the file at start")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    from services.render import make_console

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else (logging.INFO if settings.DEBUG else settings.LOG_LEVEL.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args.command:
        parser.print_help()
        return EXIT_OK

    console = make_console(args.color or settings.COLOR)

    try:
        if args.command == "compare":
            results = [compare_files(args.before, args.after, console)]
        elif args.command == "git":
            results = compare_git(console, args.rev_a, args.rev_b, args.file, args.all)
        elif args.command == "watch":
            watch_lockfile(console, args.file, args.rev)
            return EXIT_OK
        elif args.command == "serve":
            run_server(args.host, args.port, args.reload)
            return EXIT_OK
    except LockdiffError as e:
        print(f"lockdiff: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.exit_code and any(not r.is_identical for r in results):
        return EXIT_DIFFERENCES
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
