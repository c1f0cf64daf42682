# -*- coding: utf-8 -*-
"""
    malinger
    ~~~~~~~~
    Slow-response HTTP/HTTPS proxy for testing how applications cope with
    sluggish or unresponsive dependencies.

    :copyright: (c) 2013-present by Abhinav Singh and contributors.
    :license: BSD, see LICENSE for more details.
"""
import sys
import argparse
import ipaddress
from typing import Any, List, Optional

from .utils import parse_host_port
from .logger import Logger
from .version import __version__
from .constants import DEFAULT_HTTP_PORT, DEFAULT_HTTPS_PORT


class FlagParser:
    """Wrapper around argparse module.

    Import `flag.flags` and use `add_argument` API
    to define custom flags within respective Python files.

    Best Practice:
    1. Define flags at the top of your class files.
    2. DO NOT add flags within your class `__init__` method OR
       within class methods.  It MAY result into runtime exception,
       especially if your class is initialized multiple times or if
       class method registering the flag gets invoked multiple times.
    """

    def __init__(self) -> None:
        self.actions: List[str] = []
        self.parser = argparse.ArgumentParser(
            description='malinger v%s' % __version__,
            epilog='Proxy that makes external APIs slow.  Run with --remote-host to get started.',
        )

    def add_argument(self, *args: Any, **kwargs: Any) -> argparse.Action:
        """Register a flag."""
        action = self.parser.add_argument(*args, **kwargs)
        self.actions.append(action.dest)
        return action

    def parse_args(
            self, input_args: Optional[List[str]],
    ) -> argparse.Namespace:
        """Parse flags from input arguments.

        Unrecognized arguments make argparse exit the process."""
        return self.parser.parse_args(input_args)

    @staticmethod
    def initialize(
        input_args: Optional[List[str]] = None,
        **opts: Any,
    ) -> argparse.Namespace:
        """Parse, override, validate and return flags.

        Keyword ``opts`` take precedence over ``input_args`` and are
        mostly useful when embedding malinger or within tests."""
        if input_args is None:
            input_args = []

        args = flags.parse_args(input_args)

        # Print version and exit
        if args.version:
            print(__version__)
            sys.exit(0)

        for dest in flags.actions:
            if dest in opts:
                setattr(args, dest, opts[dest])

        # Proxying to an undefined host is never what the user wants.
        if not args.remote_host:
            print('--remote-host is required')
            sys.exit(1)

        if args.delay < 0:
            print('--delay must be zero or a positive number of seconds')
            sys.exit(1)

        try:
            args.remote_host, args.remote_port = parse_host_port(
                args.remote_host,
                DEFAULT_HTTPS_PORT if args.remote_ssl else DEFAULT_HTTP_PORT,
            )
        except ValueError:
            print('Invalid --remote-host %s' % args.remote_host)
            sys.exit(1)

        # Setup logging module
        Logger.setup(args.log_file, args.log_level, args.log_format)

        args.hostname = ipaddress.ip_address(str(args.hostname))
        args.delay = float(args.delay)
        return args


flags = FlagParser()
