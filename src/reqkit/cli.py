"""Command line entry point issuing a single request."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from .client import request
from .exceptions import ReqkitError, StatusError
from .opts import (
    with_body,
    with_decompress_gzip,
    with_form,
    with_header,
    with_json,
    with_proxy,
    with_query,
    with_redirect,
    with_timeout,
)
from .request_options import Option
from .response import Response


def _split_pairs(values: Sequence[str], separator: str) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for raw in values:
        key, found, value = raw.partition(separator)
        if not found or not key.strip():
            raise ValueError(f"expected 'key{separator}value', got {raw!r}")
        pairs.append((key.strip(), value.strip()))
    return pairs


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="reqkit", description="Send one HTTP request.")
    parser.add_argument("method")
    parser.add_argument("url")
    parser.add_argument("-H", "--header", action="append", default=[], help="'Name: value', repeatable")
    parser.add_argument("-q", "--query", action="append", default=[], help="'key=value', repeatable")
    body = parser.add_mutually_exclusive_group()
    body.add_argument("--json", dest="json_body", help="JSON document sent as the body")
    body.add_argument("--form", action="append", default=None, help="'key=value' form field, repeatable")
    body.add_argument("--data", help="raw body text")
    parser.add_argument("--timeout", type=float, default=0.0)
    parser.add_argument("--max-redirects", type=int, default=None)
    parser.add_argument("--proxy", default=None)
    parser.add_argument("--gzip", action="store_true", help="decode compressed bodies")
    parser.add_argument("-i", "--include", action="store_true", help="print status line and headers")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def _build_options(args: argparse.Namespace) -> list[Option]:
    options: list[Option] = []
    for key, value in _split_pairs(args.header, ":"):
        options.append(with_header(key, value))
    query: dict[str, list[str]] = {}
    for key, value in _split_pairs(args.query, "="):
        query.setdefault(key, []).append(value)
    if query:
        options.append(with_query(query))
    if args.json_body is not None:
        options.append(with_json(json.loads(args.json_body)))
    if args.form:
        options.append(with_form(dict(_split_pairs(args.form, "="))))
    if args.data is not None:
        options.append(with_body(args.data.encode()))
    if args.timeout:
        options.append(with_timeout(args.timeout))
    if args.max_redirects is not None:
        options.append(with_redirect(args.max_redirects))
    if args.proxy:
        options.append(with_proxy(args.proxy))
    if args.gzip:
        options.append(with_decompress_gzip())
    return options


def _print_response(response: Response, include: bool) -> None:
    if include:
        print(f"HTTP {response.status_code}")
        for key, value in response.headers.items():
            print(f"{key}: {value}")
        print()
    try:
        text = response.text()
    except ReqkitError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return
    if text:
        print(text)


def _main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        options = _build_options(args)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        response = request(args.method, args.url, *options)
    except StatusError as exc:
        _print_response(exc.response, args.include)
        return 1
    except ReqkitError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    _print_response(response, args.include)
    return 0


def main() -> None:
    raise SystemExit(_main())
