"""Mindshare CLI - deterministic synthetic data, scoring and graph output.

Usage:
    mindshare generate [--seed SEED] [--count N] [--out FILE]
    mindshare score (--text TEXT | --input PATH) [--topics t1,t2]
    mindshare graph [--seed SEED] [--count N | --input PATH] [--k K] [--cluster-mode MODE]
    mindshare audit [--seed SEED] [--count N] [--office O] [--product P] [--min-iq N] ...
    mindshare serve [--host HOST] [--port PORT]

Seed and count default to MINDSHARE_DEFAULT_SEED / MINDSHARE_BASE_COUNT.

Exit codes:
    0: Success
    1: Internal error (unexpected)
    2: Invalid input
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from mindshare.errors import MindshareError
from mindshare.graph.similarity import DEFAULT_NEIGHBOR_COUNT, build_similarity_graph
from mindshare.models.brief import AdvisorTenure, Brief, Office, Product, RiskBand
from mindshare.models.graph import ClusterMode
from mindshare.scoring.engine import score_text
from mindshare.scoring.rules import get_rule_set_from_env
from mindshare.synthetic.universe import generate_universe
from mindshare.workspace.filters import BriefFilters
from mindshare.workspace.session import (
    MindshareWorkspace,
    get_default_base_count,
    get_default_seed,
)

logger = logging.getLogger(__name__)

_BRIEF_LIST = TypeAdapter(list[Brief])


def _output_json(data: dict[str, Any] | BaseModel) -> None:
    """Output JSON to stdout with deterministic ordering."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    print(json.dumps(data, sort_keys=True, indent=2))


def _error_payload(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {"code": code, "details": details or {}, "message": message}


def _read_text(input_path: str | None) -> str:
    if input_path:
        return Path(input_path).read_text(encoding="utf-8")
    return sys.stdin.read()


def _load_briefs(input_path: str) -> list[Brief]:
    """Load briefs from a JSON file holding either a brief list or a universe object."""
    data = json.loads(Path(input_path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("briefs", [])
    return _BRIEF_LIST.validate_python(data)


def _csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def cmd_generate(args: argparse.Namespace) -> int:
    universe = generate_universe(args.seed, args.count)
    if args.out:
        Path(args.out).write_text(
            json.dumps(universe.model_dump(mode="json"), sort_keys=True, indent=2),
            encoding="utf-8",
        )
        _output_json(
            {"advisors": len(universe.advisors), "briefs": len(universe.briefs), "out": args.out}
        )
    else:
        _output_json(universe)
    return 0


def cmd_score(args: argparse.Namespace) -> int:
    text = args.text if args.text is not None else _read_text(args.input)
    result = score_text(text, _csv(args.topics), rule_set=get_rule_set_from_env())
    _output_json(result)
    return 0


def cmd_graph(args: argparse.Namespace) -> int:
    if args.input:
        briefs = _load_briefs(args.input)
    else:
        briefs = generate_universe(args.seed, args.count).briefs
    graph = build_similarity_graph(briefs, k=args.k, cluster_mode=args.cluster_mode)
    _output_json(graph)
    return 0


def cmd_audit(args: argparse.Namespace) -> int:
    """Regenerate a workspace for the seed and print its audit snapshot."""
    filters = BriefFilters(
        offices=[Office(v) for v in args.office],
        products=[Product(v) for v in args.product],
        risks=[RiskBand(v) for v in args.risk],
        tenures=[AdvisorTenure(v) for v in args.tenure],
        search_term=args.search or "",
        compliance_range=(args.min_iq, args.max_iq),
    )
    workspace = MindshareWorkspace(seed=args.seed, base_count=args.count)
    payload = {
        "insights": workspace.insights().model_dump(mode="json"),
        "snapshot": workspace.audit_snapshot(filters).model_dump(mode="json"),
        "stats": workspace.stats(filters).model_dump(mode="json"),
    }
    _output_json(payload)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "mindshare.api.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )
    return 0


def _add_dataset_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--seed",
        default=None,
        help="Dataset seed (default: MINDSHARE_DEFAULT_SEED or mindshare-demo-seed)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="Number of briefs (default: MINDSHARE_BASE_COUNT or 220)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mindshare",
        description="Mindshare - synthetic advisor briefs, compliance scoring and similarity graphs",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level written to stderr (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    generate_parser = subparsers.add_parser("generate", help="Generate a synthetic universe")
    _add_dataset_arguments(generate_parser)
    generate_parser.add_argument(
        "--out", metavar="FILE", help="Write the universe JSON to FILE instead of stdout"
    )

    score_parser = subparsers.add_parser("score", help="Score brief text for compliance")
    source = score_parser.add_mutually_exclusive_group()
    source.add_argument("--text", default=None, help="Text to score")
    source.add_argument(
        "--input", metavar="PATH", default=None, help="Read text from PATH (stdin if omitted)"
    )
    score_parser.add_argument(
        "--topics", default=None, help="Comma-separated explicit topic keys"
    )

    graph_parser = subparsers.add_parser("graph", help="Build the brief similarity graph")
    _add_dataset_arguments(graph_parser)
    graph_parser.add_argument(
        "--input",
        metavar="PATH",
        default=None,
        help="JSON file with a brief list or a generated universe (overrides --seed/--count)",
    )
    graph_parser.add_argument("--k", type=int, default=DEFAULT_NEIGHBOR_COUNT)
    graph_parser.add_argument(
        "--cluster-mode",
        default=ClusterMode.TOPIC.value,
        choices=[m.value for m in ClusterMode],
    )

    audit_parser = subparsers.add_parser("audit", help="Print an audit snapshot for a dataset")
    _add_dataset_arguments(audit_parser)
    audit_parser.add_argument("--office", action="append", default=[], choices=list(Office))
    audit_parser.add_argument("--product", action="append", default=[], choices=list(Product))
    audit_parser.add_argument("--risk", action="append", default=[], choices=list(RiskBand))
    audit_parser.add_argument(
        "--tenure", action="append", default=[], choices=list(AdvisorTenure)
    )
    audit_parser.add_argument("--search", default=None, help="Advisor name / topic search term")
    audit_parser.add_argument("--min-iq", type=int, default=0)
    audit_parser.add_argument("--max-iq", type=int, default=100)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


COMMANDS = {
    "generate": cmd_generate,
    "score": cmd_score,
    "graph": cmd_graph,
    "audit": cmd_audit,
    "serve": cmd_serve,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Exit codes:
        0: Success
        1: Internal error (unexpected)
        2: Invalid input
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if hasattr(args, "seed") and args.seed is None:
            args.seed = get_default_seed()
        if hasattr(args, "count") and args.count is None:
            args.count = get_default_base_count()
        return COMMANDS[args.command](args)

    except MindshareError as e:
        _output_json(_error_payload("INVALID_INPUT", e.message, e.details))
        return 2
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        _output_json(_error_payload("INVALID_INPUT", "Input failed validation", {"errors": errors}))
        return 2
    except (OSError, json.JSONDecodeError) as e:
        _output_json(_error_payload("INVALID_INPUT", str(e)))
        return 2
    except Exception as e:
        logger.exception("Unhandled CLI error")
        _output_json(_error_payload("INTERNAL_ERROR", str(e)))
        return 1


if __name__ == "__main__":
    sys.exit(main())
