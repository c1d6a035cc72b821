"""CLI entrypoint for converting a stage document into graph JSON."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

from .config import load_settings
from .converter import convert, run_pipeline


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert a stage pipeline YAML document into graph JSON.")
    parser.add_argument(
        "--input-path",
        default="-",
        help="Stage document to read; '-' reads from stdin.",
    )
    parser.add_argument(
        "--output-path",
        default="",
        help="Where to save the graph JSON; stdout when omitted.",
    )
    parser.add_argument(
        "--format",
        choices=("plain", "reactflow", "report"),
        default="plain",
        help="'plain' nodes/edges, 'reactflow' canvas payload, or 'report' with phase reports.",
    )
    parser.add_argument(
        "--suppress-root",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Hide the first top-level stage as an implicit root.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to STAGE_GRAPH_LOG_LEVEL or WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_settings().with_overrides(
        suppress_root=args.suppress_root,
        log_level=args.log_level.upper() if args.log_level else None,
    )
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.input_path == "-":
        text = sys.stdin.read()
    else:
        input_path = Path(args.input_path)
        if not input_path.is_file():
            print(f"Input document not found: {input_path}", file=sys.stderr)
            return 2
        text = input_path.read_text(encoding="utf-8")

    if args.format == "report":
        artifact: Dict[str, Any] = run_pipeline(text, settings=settings)
    else:
        artifact = convert(text, settings=settings, output_format=args.format)
    rendered = json.dumps(artifact, ensure_ascii=False, indent=2)

    if not args.output_path:
        print(rendered)
        return 0

    output_path = Path(args.output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered, encoding="utf-8")
    print(f"Graph saved to: {output_path.resolve()}", file=sys.stderr)
    print(
        "Counts:",
        f"nodes={len(artifact['nodes'])}",
        f"edges={len(artifact['edges'])}",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
