"""CLI entrypoint for fastviterbi."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from fastviterbi.config import load_config
from fastviterbi.core import run_decode
from fastviterbi.io import read_request, to_json, write_json
from fastviterbi.models import DecodeRequest


def build_parser() -> argparse.ArgumentParser:
    """Create the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="fastviterbi",
        description="Layered Viterbi decoder for map matching.",
    )
    subparsers = parser.add_subparsers(dest="command")

    decode = subparsers.add_parser("decode", help="Decode a JSON request file")
    decode.add_argument("request_path", help="Path to a decoding request JSON file")
    decode.add_argument(
        "--target-road-path",
        type=int,
        nargs="+",
        default=None,
        help="Road ids to anchor decoding to (overrides the request's target)",
    )
    decode.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output JSON path. If omitted, prints to stdout.",
    )

    serve = subparsers.add_parser("serve", help="Run the fastviterbi HTTP API")
    serve.add_argument("--host", default=None, help="Override API host")
    serve.add_argument("--port", type=int, default=None, help="Override API port")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    config = load_config()
    config.configure_logging()

    if args.command == "decode":
        try:
            request = read_request(args.request_path)
            if args.target_road_path is not None:
                request = DecodeRequest.model_validate(
                    {**request.model_dump(), "target_road_path": args.target_road_path}
                )
            response = run_decode(request, limits=config.limits)
        except (OSError, ValueError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        if args.output:
            write_json(response, args.output)
            print(f"Wrote decoding JSON to {args.output}")
            return 0
        print(to_json(response))
        return 0

    if args.command == "serve":
        try:
            import uvicorn
        except ModuleNotFoundError:
            print(
                "`fastviterbi serve` requires uvicorn. Install project dependencies first.",
                file=sys.stderr,
            )
            return 1

        host = args.host or config.api_host
        port = args.port or config.api_port
        uvicorn.run(
            "fastviterbi.api:app",
            host=host,
            port=port,
            workers=config.workers,
            reload=False,
        )
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
