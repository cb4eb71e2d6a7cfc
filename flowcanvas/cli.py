"""
Command-line interface for flowcanvas.

Usage:
    flowcanvas validate ./examples/support_flow.json
    flowcanvas export ./examples/support_flow.json -o ./build/ --format mermaid
    flowcanvas export ./examples/support_flow.json -o ./build/ --format graphviz --strict
    flowcanvas format ./examples/support_flow.json --in-place
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from flowcanvas.backend.graphviz import GraphvizExporter
from flowcanvas.backend.mermaid import MermaidExporter
from flowcanvas.config import CanvasConfig, load_config
from flowcanvas.core.ir import FlowGraph
from flowcanvas.core.serialization import JsonSerializer, MalformedDocument
from flowcanvas.core.validation import errors, summarize, validate_flow

logger = logging.getLogger(__name__)

FORMATS = ["json", "mermaid", "graphviz", "dot"]


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def load_flow_file(filepath: Path) -> FlowGraph:
    """
    Read a flow document from disk.

    Raises:
        MalformedDocument: if the file is not a valid flow document.
    """
    logger.info("Loading flow from %s", filepath)
    imported = JsonSerializer.from_json(filepath.read_text(encoding="utf-8"))
    return JsonSerializer.to_graph(imported)


def export_flow(
    flow: FlowGraph,
    output_path: Path,
    format: str,
    stem: str = "flow",
    config: Optional[CanvasConfig] = None,
) -> Path:
    """Export a flow to the specified format."""
    config = config or CanvasConfig()

    if format == "json":
        content = JsonSerializer.to_json(flow, indent=config.indent)
        ext = ".json"
    elif format == "mermaid":
        content = MermaidExporter.to_mermaid(flow, direction=config.mermaid_direction)
        ext = ".mmd"
    elif format == "graphviz" or format == "dot":
        content = GraphvizExporter.to_dot(flow, name=stem)
        ext = ".dot"
    else:
        raise ValueError(f"Unknown format: {format}. Use: {', '.join(FORMATS)}")

    # Sanitize the stem for use as filename
    safe_name = stem.lower().replace(" ", "_").replace("/", "_")
    safe_name = "".join(c for c in safe_name if c.isalnum() or c == "_") or "flow"

    output_file = output_path / f"{safe_name}{ext}"
    output_file.write_text(content, encoding="utf-8")
    logger.info("Wrote %s", output_file)

    return output_file


def _cmd_validate(flow: FlowGraph, args, config: CanvasConfig) -> int:
    issues = validate_flow(flow)
    for issue in issues:
        print(str(issue))
    print(summarize(issues))
    return 1 if errors(issues) else 0


def _cmd_export(flow: FlowGraph, args, config: CanvasConfig) -> int:
    strict = args.strict or config.strict_export
    if strict:
        problems = errors(validate_flow(flow))
        if problems:
            for issue in problems:
                print(str(issue), file=sys.stderr)
            count = len(problems)
            print(f"Error: {count} error{'s' if count != 1 else ''} must be fixed before export.", file=sys.stderr)
            return 1

    args.output.mkdir(parents=True, exist_ok=True)
    output_file = export_flow(flow, args.output, args.format, stem=args.input.stem, config=config)
    if args.verbose:
        print(f"Exported '{args.input}' -> {output_file}")
    else:
        print(f"{output_file}")
    return 0


def _cmd_format(flow: FlowGraph, args, config: CanvasConfig) -> int:
    content = JsonSerializer.to_json(flow, indent=config.indent)
    if args.in_place:
        args.input.write_text(content + "\n", encoding="utf-8")
        if args.verbose:
            print(f"Formatted {args.input}")
    else:
        print(content)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowcanvas",
        description="Validate and export flow documents.",
        epilog="Example: flowcanvas export ./examples/support_flow.json -o ./build/ -f mermaid"
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "input",
        type=Path,
        help="Flow JSON document"
    )
    common.add_argument(
        "--config",
        type=Path,
        help="Path to a flowcanvas.json config file"
    )
    common.add_argument(
        "--log-level",
        help="Logging level (default: from config, WARNING)"
    )
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    validate_cmd = commands.add_parser("validate", parents=[common], help="Report validation issues")
    validate_cmd.set_defaults(handler=_cmd_validate)

    export_cmd = commands.add_parser("export", parents=[common], help="Export to another format")
    export_cmd.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("."),
        help="Output directory (default: current directory)"
    )
    export_cmd.add_argument(
        "-f", "--format",
        choices=FORMATS,
        default="json",
        help="Output format (default: json)"
    )
    export_cmd.add_argument(
        "--strict",
        action="store_true",
        help="Refuse to export a flow with validation errors"
    )
    export_cmd.set_defaults(handler=_cmd_export)

    format_cmd = commands.add_parser("format", parents=[common], help="Print the canonical JSON form")
    format_cmd.add_argument(
        "-i", "--in-place",
        action="store_true",
        help="Rewrite the input file instead of printing"
    )
    format_cmd.set_defaults(handler=_cmd_format)

    return parser


def main(argv: List[str] = None) -> int:
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    _configure_logging(args.log_level or config.log_level)

    # Validate input file
    if not args.input.exists():
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        return 1

    if not args.input.is_file():
        print(f"Error: Not a file: {args.input}", file=sys.stderr)
        return 1

    try:
        flow = load_flow_file(args.input)
    except MalformedDocument as e:
        print(f"Error: {args.input}: {e}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error loading file: {e}", file=sys.stderr)
        return 1

    return args.handler(flow, args, config)


if __name__ == "__main__":
    sys.exit(main())
