#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Command line entry point: ``viewremote view``.

    viewremote view --endpoint node1:7051 --function init --input aGVsbG8=
    echo -n raw-bytes | viewremote view --endpoint node1:7051 --function init --stdin

The command handler receives its output streams, its standard-input stream and
its process-exit function through the constructor, so nothing here writes to
fixed global streams or exits the process on its own.
"""

import argparse
import sys
from typing import BinaryIO, Callable, List, Mapping, Optional, TextIO

from ._version import __version__
from .core.config import load_config
from .core.crypto import Sha256HashProvider, X509SigningIdentity
from .core.data import render
from .core.inputs import resolve, validate_parameters
from .core.nodes import ConnectionConfig, ViewClient
from .core.utils.exceptions import ExceptionFormatter, ViewRemoteError
from .core.utils.logger import ModernLogger

ClientFactory = Callable[..., ViewClient]


class ViewCommand(ModernLogger):
    """
    Handler of the ``view`` sub-command.
    """

    def __init__(
        self,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        stdin: Optional[BinaryIO] = None,
        terminate: Optional[Callable[[int], None]] = None,
        client_factory: Optional[ClientFactory] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        super().__init__(name="cli")
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.stdin = stdin
        self.terminate = terminate if terminate is not None else sys.exit
        self.client_factory = client_factory or ViewClient
        self.environ = environ

    def run(self, args: argparse.Namespace) -> int:
        """
        Execute the command; on failure report the error and terminate with 1.
        """
        try:
            self.invoke(args)
        except ViewRemoteError as exc:
            return self._fail("Error: {0}".format(exc))
        except Exception as exc:
            self.error("Unexpected failure: %s", exc, exc_info=True)
            return self._fail("Error: {0}".format(ExceptionFormatter.format_exception_summary(exc)))
        return 0

    def _fail(self, message: str) -> int:
        self.err.write(message + "\n")
        self.err.flush()
        self.terminate(1)
        return 1

    def invoke(self, args: argparse.Namespace) -> None:
        validate_parameters(args.endpoint, args.function)
        payload = resolve(args.stdin, args.input, stdin=self.stdin)

        config = load_config(args.config, environ=self.environ)
        identity = X509SigningIdentity.load(config.identity_path, config.key_path)
        connection = ConnectionConfig.build(
            args.endpoint,
            config.peer_ca_cert_path,
            timeout=config.connect_timeout,
            server_name_override=config.server_name_override,
        )
        client = self.client_factory(
            connection,
            identity,
            Sha256HashProvider(),
            response_timeout=args.timeout if args.timeout is not None else config.response_timeout,
        )

        self.debug("Invoking '%s' on %s", args.function, args.endpoint)
        result = client.invoke(args.function, payload)
        self.out.write(render(result) + "\n")
        self.out.flush()


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError("expected a number, got {0!r}".format(value)) from None
    if number <= 0:
        raise argparse.ArgumentTypeError("must be positive, got {0}".format(value))
    return number


def register_view_command(subparsers, command: ViewCommand) -> argparse.ArgumentParser:
    """
    Add the ``view`` sub-command, dispatching to ``command.run``.
    """
    parser = subparsers.add_parser("view", help="Invoke a view")
    parser.add_argument("--endpoint", help="Sets the endpoint of the node to connect to (host:port)")
    parser.add_argument(
        "--input",
        help="Sets the input to the view function, encoded either as base64, or as-is",
    )
    parser.add_argument("--function", help="Sets the function name to be invoked")
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Sets standard input as the input stream",
    )
    parser.add_argument("--config", help="Path to the client configuration file (TOML)")
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Seconds to wait for the response (default: wait indefinitely)",
    )
    parser.set_defaults(handler=command.run)
    return parser


def build_parser(command: ViewCommand) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="viewremote", description="Invoke views on remote nodes")
    parser.add_argument("--version", action="version", version="%(prog)s {0}".format(__version__))
    parser.add_argument(
        "--log-level",
        default="warning",
        choices=["debug", "info", "warning", "error", "critical"],
        help="Console log level (default: warning)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    register_view_command(subparsers, command)
    return parser


def main(argv: Optional[List[str]] = None, command: Optional[ViewCommand] = None) -> int:
    command = command or ViewCommand()
    args = build_parser(command).parse_args(argv)
    ModernLogger.configure(args.log_level)
    return args.handler(args)


if __name__ == "__main__":
    main()
