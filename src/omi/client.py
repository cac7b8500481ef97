"""
SAS Open Metadata Interface demo client

This module implements the command line client that connects to a SAS
metadata server, runs one read-only metadata task and prints the formatted
XML response.
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from .connection import ConnectionManager, ConnectionParameters, Connector
from .exceptions import OMIDemoError, UsageError
from .tasks import TASKS, OMITask, get_task, task_names
from .xmlformat import format_xml
from ..utils.logging import configure_cli_logging, configure_debug_logging, silence_external_loggers

PROG = "omi-demo"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8561
DEFAULT_TASK = "GetRepositories"

console = Console()


class OMIClient:
    """
    Runs metadata tasks against a SAS metadata server, one session per task.
    """

    def __init__(self, params: ConnectionParameters, connector: Optional[Connector] = None):
        self.params = params
        self.connection = ConnectionManager(params, connector=connector)
        self.logger = logging.getLogger(__name__)

    def run_task(self, task: OMITask, args: Sequence[str] = ()) -> str:
        """
        Run a task and return its formatted XML response.

        The task arguments and connection parameters are checked before
        connecting. The session is closed whatever the outcome.

        Raises:
            OMIDemoError: If validation, connection, the remote call or formatting fails
        """
        task.validate_extra_args(args)
        self.connection.validate()

        with self.connection.session() as session:
            try:
                response = task.execute(session)
            except OMIDemoError:
                self.logger.error("Failed whilst running metadata task.")
                raise
            return format_xml(response.xml)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports errors as UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(f"{message}\n{self.format_usage().strip()}")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        description="Demo of the SAS Open Metadata Interface (OMI) from Python",
    )
    parser.add_argument("--host", default=DEFAULT_HOST,
                        help=f"SAS metadata server host name (default={DEFAULT_HOST})")
    parser.add_argument("--port", "-t", type=int, default=DEFAULT_PORT,
                        help=f"SAS metadata server port number (default={DEFAULT_PORT})")
    parser.add_argument("--user", "-u", help="SAS metadata server user id (required)")
    parser.add_argument("--password", "-p", help="SAS metadata server password (required)")
    parser.add_argument("--authdomain", "-d", default=None,
                        help="SAS metadata server authentication domain (default=blank)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging with source locations")
    parser.add_argument("--task", "-k", default=DEFAULT_TASK,
                        help=f"Metadata task name (default={DEFAULT_TASK})")
    parser.add_argument("--list-tasks", action="store_true", help="List the known metadata tasks")
    parser.add_argument("task_args", nargs="*", metavar="ARG",
                        help="Additional arguments for the selected task")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse the command line.

    Raises:
        UsageError: If the command line is invalid or a required option is missing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.list_tasks:
        missing = [f"--{name}" for name in ("user", "password") if getattr(args, name) is None]
        if missing:
            parser.error(f"the following arguments are required: {', '.join(missing)}")

    return args


def list_tasks_command() -> None:
    """Print the registered tasks."""
    table = Table(title="Metadata Tasks", show_header=True, header_style="bold magenta")
    table.add_column("Task", style="cyan", no_wrap=True)
    table.add_column("Arguments", style="yellow")
    table.add_column("Description", style="white")

    for name in task_names():
        task = TASKS[name]
        table.add_row(name, " ".join(f"<{arg}>" for arg in task.arg_names) or "-", task.description)

    console.print(table)


def print_xml(xml: str) -> None:
    """Print formatted XML, highlighted on a terminal and verbatim otherwise."""
    if console.is_terminal:
        console.print(Syntax(xml, "xml", theme="ansi_dark", background_color="default"))
    else:
        console.file.write(xml + "\n")
        console.file.flush()


def main(argv: Optional[List[str]] = None, connector: Optional[Connector] = None) -> int:
    """Main entry point for the OMI demo client."""
    try:
        args = parse_args(argv)
    except UsageError as e:
        print(f"ERROR: {e}")
        return 1

    logger = configure_cli_logging(args.verbose)
    silence_external_loggers()
    if args.debug:
        configure_debug_logging()

    if args.list_tasks:
        list_tasks_command()
        return 0

    try:
        task = get_task(args.task)
        logger.info("Found required task '%s'.", args.task)

        params = ConnectionParameters(
            host=args.host,
            port=args.port,
            user=args.user,
            password=args.password,
            auth_domain=args.authdomain,
        )
        client = OMIClient(params, connector=connector)
        xml = client.run_task(task, args.task_args)

        print_xml(xml)
        return 0

    except KeyboardInterrupt:
        print("\nAborted by user")
        return 1
    except OMIDemoError as e:
        print(f"ERROR: {PROG} failed: {e}")
        return 1
    except Exception as e:
        print(f"ERROR: {PROG} failed unexpectedly: {type(e).__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
