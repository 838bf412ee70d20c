#!/usr/bin/env python3
"""
Repo Mirror - keep a local folder in step with a GitHub repository.

Commands:
    config <key> <value>          Set a config value (username, token, repo, branch, quiet)
    clone <owner>/<repo> [branch] Clone into the current directory
    pull                          Download the remote branch over the repository
    update                        Clean update: mirror the remote exactly (deletes extras)
    push <file>                   Upload one file (requires token)
    daemon [interval] [--all]     Run clean updates forever, every <interval> seconds
    service [interval] [--all]    Start the daemon as a detached background process
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path

from repomirror import __version__
from repomirror.constants import DEFAULT_API_BASE, DEFAULT_INTERVAL
from repomirror.errors import MirrorError
from repomirror.operations import clone, make_reconciler, pull, push, set_config, update
from repomirror.paths import get_program_path
from repomirror.remote import ClientConfig, ContentClient
from repomirror.sync import SyncDaemon, SyncResult, daemon_log_path
from repomirror.ui import failure, info, success
from repomirror.utils import TeeOutput

# ============================================================================
# Configuration
# ============================================================================

API_BASE = os.environ.get("REPOMIRROR_API_BASE", DEFAULT_API_BASE)


def get_client_config() -> ClientConfig:
    return ClientConfig(api_base=API_BASE)


def report(result: SyncResult, done: str, failed: str) -> int:
    """Print the closing line for a download/update and return the exit code."""
    if result.success:
        success(f"{done} ({result.downloaded} files)")
        return 0
    failure(f"{failed}: {result.failure_reason}")
    if len(result.failures) > 1:
        for reason in result.failures[1:6]:
            info(f"  {reason}")
        if len(result.failures) > 6:
            info(f"  ... and {len(result.failures) - 6} more")
    return 1


# ============================================================================
# Command handlers
# ============================================================================


def cmd_config(args) -> int:
    path, key = set_config(Path.cwd(), args.key, args.value)
    shown = "***" if key == "token" else args.value
    success(f"Config updated: {key} = {shown} ({path})")
    return 0


def cmd_clone(args) -> int:
    result = clone(Path.cwd(), args.repo, args.branch, make_reconciler(get_client_config()))
    return report(result, "Clone complete", "Clone failed")


def cmd_pull(args) -> int:
    result = pull(Path.cwd(), make_reconciler(get_client_config()))
    return report(result, "Pull complete", "Pull failed")


def cmd_update(args) -> int:
    result = update(Path.cwd(), make_reconciler(get_client_config()))
    return report(result, "Update complete", "Update failed, local files left unchanged")


def cmd_push(args) -> int:
    rel_path = push(Path.cwd(), args.file, ContentClient(get_client_config()))
    success(f"Successfully pushed {rel_path}")
    return 0


def cmd_daemon(args) -> int:
    start_dir = Path.cwd()
    tee = TeeOutput(daemon_log_path(start_dir, args.all))
    sys.stdout = tee
    try:
        daemon = SyncDaemon(
            start_dir,
            make_reconciler(get_client_config()),
            interval=args.interval,
            scan_all=args.all,
        )
        daemon.run()
    finally:
        sys.stdout = tee.terminal
        tee.close()
    return 0


def cmd_service(args) -> int:
    """Launch `daemon` in a detached process that outlives this one."""
    program = get_program_path()
    if getattr(sys, "frozen", False):
        command = [str(program)]
    else:
        command = [sys.executable, str(program.resolve())]
    command += ["daemon", str(args.interval)]
    if args.all:
        command.append("--all")

    kwargs = {}
    if os.name == "nt":
        kwargs["creationflags"] = subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
    else:
        kwargs["start_new_session"] = True

    try:
        process = subprocess.Popen(
            command,
            cwd=Path.cwd(),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            **kwargs,
        )
    except OSError as e:
        failure(f"Could not start service: {e}")
        return 1

    success(f"Service started (pid {process.pid}), log: {daemon_log_path(Path.cwd(), args.all)}")
    return 0


# ============================================================================
# Main
# ============================================================================


def positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive number of seconds")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mirror",
        description="Repo Mirror - keep a local folder in step with a GitHub repository",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", metavar="<command>")

    p = sub.add_parser("config", help="Set configuration (username, token, repo, branch, quiet)")
    p.add_argument("key")
    p.add_argument("value")
    p.set_defaults(handler=cmd_config)

    p = sub.add_parser("clone", help="Clone <owner>/<repo> into the current directory")
    p.add_argument("repo")
    p.add_argument("branch", nargs="?", default=None)
    p.set_defaults(handler=cmd_clone)

    p = sub.add_parser("pull", help="Download the remote branch over the repository")
    p.set_defaults(handler=cmd_pull)

    p = sub.add_parser("update", help="Mirror the remote exactly, deleting extra local files")
    p.set_defaults(handler=cmd_update)

    p = sub.add_parser("push", help="Upload one file (requires token)")
    p.add_argument("file")
    p.set_defaults(handler=cmd_push)

    for name, help_text, handler in (
        ("daemon", "Run clean updates forever", cmd_daemon),
        ("service", "Start the daemon in the background", cmd_service),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("interval", nargs="?", type=positive_int, default=DEFAULT_INTERVAL)
        p.add_argument("--all", action="store_true",
                       help="Update every repository under the current directory")
        p.set_defaults(handler=handler)

    return parser


def main(argv=None) -> int:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, "handler", None):
        parser.print_help()
        return 1

    try:
        return args.handler(args)
    except MirrorError as e:
        failure(f"Error: {e}")
        return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nCancelled by user.")
        sys.exit(0)
