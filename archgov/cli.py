#!/usr/bin/env python3
"""Architecture governance CLI - validate diagrams and inspect layer policy."""

import argparse
import json
import logging
import sys

from .analysis import relationship_matrix, trace_dependencies
from .config import configure_logging, get_policy, load_settings
from .errors import GovernanceError
from .governance import GovernanceValidator
from .layers import layer_guidance
from .serialization import load_diagram_file

logger = logging.getLogger(__name__)


def _json_out(data, code=0):
    print(json.dumps(data, indent=2))
    sys.exit(code)


def _error_out(message):
    _json_out({"status": "error", "error": message}, code=1)


def _load(path):
    try:
        return load_diagram_file(path)
    except (FileNotFoundError, GovernanceError) as e:
        _error_out(str(e))


# ── Commands ─────────────────────────────────────────────────────────────────

def cmd_validate(args, policy):
    diagram = _load(args.file)
    report = GovernanceValidator(policy).validate(diagram, current_layer=args.layer)
    logger.info("%s", report.get_summary())
    _json_out({
        "status": "ok",
        "report": report.to_dict(),
        "summary": report.summary(),
    }, code=1 if args.strict and report.error_count else 0)


def cmd_layers(args, policy):
    if args.level is not None:
        _json_out({"status": "ok", "layer": layer_guidance(args.level, policy)})
    _json_out({"status": "ok", "layers": [layer_guidance(l.level, policy) for l in policy.layers]})


def cmd_trace(args, policy):
    diagram = _load(args.file)
    if diagram.get_node(args.node_id) is None:
        _error_out(f"Node not found: {args.node_id}")
    _json_out({"status": "ok", "trace": trace_dependencies(diagram, args.node_id).to_dict()})


def cmd_matrix(args, policy):
    diagram = _load(args.file)
    _json_out({"status": "ok", "matrix": relationship_matrix(diagram, args.kind).to_dict()})


# ── Main ─────────────────────────────────────────────────────────────────────

def build_parser():
    parser = argparse.ArgumentParser(prog="archgov", description="Architecture diagram governance")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate")
    p.add_argument("file")
    p.add_argument("--layer", type=int, default=None)
    p.add_argument("--strict", action="store_true", help="exit 1 when the report has errors")

    p = sub.add_parser("layers")
    p.add_argument("--level", type=int, default=None)

    p = sub.add_parser("trace")
    p.add_argument("file")
    p.add_argument("node_id")

    p = sub.add_parser("matrix")
    p.add_argument("file")
    p.add_argument("kind", choices=["capability-app", "etom-service", "app-data"])

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    settings = load_settings()
    configure_logging(settings.log_level)
    try:
        policy = get_policy(settings)
    except GovernanceError as e:
        _error_out(str(e))

    cmd_map = {
        "validate": cmd_validate,
        "layers": cmd_layers,
        "trace": cmd_trace,
        "matrix": cmd_matrix,
    }
    cmd_map[args.command](args, policy)


if __name__ == "__main__":
    main()
