# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command line entry point: ``acp-lsp serve`` or ``acp-lsp lint``."""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .lint import run_lint
from .server import AcpLanguageServer
from .utils.logging_utils import configure_server_logging, configure_split_stream_logging

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='acp-lsp',
        description='Language server and linter for ACP annotations and ACP JSON files',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command')

    serve = subparsers.add_parser('serve', help='Run the language server (default)')
    transport = serve.add_mutually_exclusive_group()
    transport.add_argument('--stdio', action='store_true', help='Communicate over stdio (default)')
    transport.add_argument('--tcp', action='store_true', help='Listen on a TCP socket')
    serve.add_argument('--host', default='127.0.0.1', help='TCP host (default: 127.0.0.1)')
    serve.add_argument('--port', type=int, default=2087, help='TCP port (default: 2087)')
    serve.add_argument('--log-level', choices=LOG_LEVELS, default='INFO')

    lint = subparsers.add_parser('lint', help='Lint files and report diagnostics')
    run_lint.add_lint_arguments(lint)
    lint.add_argument('--log-level', choices=LOG_LEVELS, default='WARNING')

    return parser


def serve(args: argparse.Namespace) -> int:
    configure_server_logging(level=getattr(logging, args.log_level))

    server = AcpLanguageServer()
    if args.tcp:
        server.start_tcp(args.host, args.port)
    else:
        server.start_io()
    return 0


def lint(args: argparse.Namespace) -> int:
    configure_split_stream_logging(level=getattr(logging, args.log_level))
    return run_lint.run(args)


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == 'lint':
        sys.exit(lint(args))
    if args.command is None:
        args = parser.parse_args(['serve'])
    sys.exit(serve(args))


if __name__ == '__main__':
    main()
