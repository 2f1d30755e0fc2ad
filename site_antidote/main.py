#!/usr/bin/env python3
"""
Site Antidote - inline every external asset of a web page.

Fetches a page, downloads its stylesheets, scripts and images, and prints a
self-contained HTML document that renders without external requests.

Usage:
    python main.py --url https://example.com > page.html
    python main.py --url https://example.com --output page.html
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional
from urllib.parse import urlparse

from site_antidote.curing import Antidote, Ingredients
from site_antidote.utils.errors import AntidoteError
from site_antidote.utils.log import (
    setup_logger,
    print_status,
    print_success,
    print_error,
    print_info
)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Argument list (defaults to sys.argv)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog='site-antidote',
        description='Inline the stylesheets, scripts and images of a web page',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s --url https://example.com > page.html
    %(prog)s --url https://example.com -o page.html --timeout 20
    %(prog)s --url https://example.com -o page.html --concurrency 8
        """
    )

    parser.add_argument(
        '--url', '-u',
        type=str,
        required=True,
        help='URL of the page to cure (e.g., https://example.com)'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help='File to write the cured HTML to (default: stdout)'
    )

    parser.add_argument(
        '--timeout',
        type=float,
        default=None,
        help='Per-request timeout in seconds (default: aiohttp default)'
    )

    parser.add_argument(
        '--concurrency', '-c',
        type=int,
        default=None,
        help='Maximum concurrent asset fetches (default: unbounded)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress output except errors'
    )

    return parser.parse_args(argv)


def validate_url(url: str) -> str:
    """
    Validate and normalize the input URL.

    Args:
        url: URL string to validate

    Returns:
        Normalized URL string

    Raises:
        ValueError: If URL is invalid
    """
    url = url.strip()

    # Add protocol if missing
    if not url.startswith(('http://', 'https://')):
        url = 'https://' + url

    parsed = urlparse(url)

    if not parsed.netloc:
        raise ValueError(f"Invalid URL: {url}")

    return url


def print_summary(summary) -> None:
    """
    Print the cure summary.

    Args:
        summary: CureSummary object
    """
    print_status("=" * 60, "dim")
    print_success("CURE SUMMARY")
    print_status("=" * 60, "dim")
    print_status(f"  Stylesheets inlined: {summary.styles_inlined}", "default")
    print_status(f"  Scripts inlined:     {summary.scripts_inlined}", "default")
    print_status(f"  Images inlined:      {summary.images_inlined}", "default")
    print_status(f"  Failed assets:       {len(summary.errors)}", "default")
    print_status(f"  Duration:            {summary.duration_seconds:.1f} seconds", "default")
    print_status("=" * 60, "dim")


def write_output(html: str, output: Optional[str]) -> None:
    """Write the cured document to a file, or stdout when no file is given."""
    if output is None:
        sys.stdout.write(html)
        sys.stdout.flush()
        return

    parent = os.path.dirname(os.path.abspath(output))
    os.makedirs(parent, exist_ok=True)

    with open(output, 'w', encoding='utf-8') as f:
        f.write(html)


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for site antidote.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_arguments(argv)

    log_level = logging.DEBUG if args.verbose else (logging.WARNING if args.quiet else logging.INFO)
    setup_logger(level=log_level)

    try:
        url = validate_url(args.url)

        if args.concurrency is not None and args.concurrency < 1:
            raise ValueError("--concurrency must be at least 1")

        if not args.quiet:
            print_info(f"Target URL: {url}")

        antidote = Antidote()
        antidote.configure(Ingredients(
            url=url,
            timeout=args.timeout,
            concurrency=args.concurrency
        ))

        html = await antidote.cure()

        write_output(html, args.output)

        if not args.quiet:
            print_summary(antidote.summary)
            if args.output:
                print_success(f"Cured page written to: {os.path.abspath(args.output)}")

        return 0

    except KeyboardInterrupt:
        print_error("Cure interrupted by user")
        return 1
    except ValueError as e:
        print_error(f"Invalid input: {e}")
        return 1
    except AntidoteError as e:
        print_error(f"{type(e).__name__}: {e}")
        return 1
    except OSError as e:
        print_error(f"Could not write output: {e}")
        return 1


def run() -> None:
    """Entry point wrapper for running as module."""
    sys.exit(asyncio.run(main()))


if __name__ == '__main__':
    run()
