#!/usr/bin/env python3
"""
Rule Engine CLI

Command line shell over rule_engine.RuleEngine. It only:
- Loads rules and criteria (JSON or YAML, file path or inline text)
- Calls the engine
- Prints results (rich tables, or JSON with --json)

Examples:
  python rule_engine_cli.py evaluate rules/pricing.json '{"Leverage": 1000}'
  python rule_engine_cli.py evaluate rules/pricing.yaml criteria.json --json
  python rule_engine_cli.py introspect rules/pricing.json --metadata --complexity
  python rule_engine_cli.py validate rules/pricing.json
  python rule_engine_cli.py operators --category date_time
"""

import argparse
import asyncio
import json
import sys

import yaml

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from rule_engine import RuleEngine, RuleEngineError
from rule_engine.parser import load_document, load_rule
from rule_engine.utils.logger import setup_logger

console = Console()


def parse_cli_args(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Supports:
      evaluate     Evaluate a rule against criteria
      introspect   Derive criteria ranges per result
      validate     Structural validation of a rule
      operators    List registered operators
    """
    parser = argparse.ArgumentParser(
        description="Rule Engine - evaluate and introspect declarative JSON rules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python rule_engine_cli.py evaluate rule.json criteria.json
  python rule_engine_cli.py evaluate rule.yaml '[{"age": 30}, {"age": 12}]' --json
  python rule_engine_cli.py introspect rule.json --metadata
  python rule_engine_cli.py validate rule.json
  python rule_engine_cli.py operators --category string
        """
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override LOG_LEVEL for this run"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # evaluate
    evaluate_parser = subparsers.add_parser("evaluate", help="Evaluate a rule against criteria")
    evaluate_parser.add_argument("rule", help="Rule file path or inline JSON/YAML")
    evaluate_parser.add_argument("criteria", help="Criteria file path or inline JSON/YAML (object or list)")
    evaluate_parser.add_argument("--trust", action="store_true", default=None, help="Skip rule validation")
    evaluate_parser.add_argument("--json", action="store_true", dest="json_output", help="Output results as JSON")

    # introspect
    introspect_parser = subparsers.add_parser("introspect", help="Derive the criteria producing each result")
    introspect_parser.add_argument("rule", help="Rule file path or inline JSON/YAML")
    introspect_parser.add_argument("--metadata", action="store_true", help="Include field/operator metadata")
    introspect_parser.add_argument("--complexity", action="store_true", help="Include complexity metrics")
    introspect_parser.add_argument("--json", action="store_true", dest="json_output", help="Output results as JSON")

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate a rule")
    validate_parser.add_argument("rule", help="Rule file path or inline JSON/YAML")
    validate_parser.add_argument("--json", action="store_true", dest="json_output", help="Output results as JSON")

    # operators
    operators_parser = subparsers.add_parser("operators", help="List registered operators")
    operators_parser.add_argument("--category", help="Only operators of this category")
    operators_parser.add_argument("--json", action="store_true", dest="json_output", help="Output results as JSON")

    return parser.parse_args(argv)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def handle_evaluate(engine: RuleEngine, args) -> int:
    """Handle `evaluate` subcommand."""
    rule = load_rule(args.rule)
    criteria = load_document(args.criteria)

    result = asyncio.run(engine.evaluate(rule, criteria, trust_rule=args.trust))
    results = result if isinstance(result, list) else [result]

    if args.json_output:
        output = [r.to_dict() for r in results]
        _print_json(output if isinstance(result, list) else output[0])
        return 0 if all(r.is_passed for r in results) else 1

    table = Table(title="Evaluation")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Passed")
    table.add_column("Value")
    table.add_column("Message")
    for index, r in enumerate(results):
        table.add_row(
            str(index),
            "[green]yes[/]" if r.is_passed else "[red]no[/]",
            escape(json.dumps(r.value, default=str)),
            escape(r.message or ""),
        )
    console.print(table)
    return 0 if all(r.is_passed for r in results) else 1


def handle_introspect(engine: RuleEngine, args) -> int:
    """Handle `introspect` subcommand."""
    result = engine.introspect(
        args.rule,
        include_metadata=args.metadata,
        include_complexity=args.complexity,
    )

    if args.json_output:
        _print_json(result.to_dict())
        return 0

    for criteria_range in result.results:
        table = Table(show_header=False, box=None, padding=(0, 2))
        for index, option in enumerate(criteria_range.options):
            table.add_row(f"[dim]option {index + 1}[/]", escape(json.dumps(option, default=str)))
        console.print(Panel(
            table,
            title=f"[bold]RESULT {json.dumps(criteria_range.result.value, default=str)}[/]",
            border_style="cyan"
        ))

    if result.default is not None:
        console.print(f"[dim]Default: {json.dumps(result.default.value, default=str)}[/]")
    if result.metadata is not None:
        console.print(Panel(json.dumps(result.metadata, indent=2), title="[bold]METADATA[/]", border_style="blue"))
    if result.complexity is not None:
        console.print(Panel(json.dumps(result.complexity, indent=2), title="[bold]COMPLEXITY[/]", border_style="blue"))
    for warning in result.warnings:
        console.print(f"[yellow]Warning: {warning}[/]")
    return 0


def handle_validate(engine: RuleEngine, args) -> int:
    """Handle `validate` subcommand."""
    result = engine.validate(args.rule)

    if args.json_output:
        _print_json(result.to_dict())
        return 0 if result.is_valid else 1

    if result.is_valid:
        console.print("[bold green]OK Rule is valid[/]")
        return 0

    console.print(f"[bold red]FAIL {result.error.message}[/]")
    console.print(f"[dim]{escape(json.dumps(result.error.element, default=str))}[/]")
    return 1


def handle_operators(engine: RuleEngine, args) -> int:
    """Handle `operators` subcommand."""
    operators = engine.operators()
    if args.category:
        operators = [op for op in operators if op["category"] == args.category]

    if args.json_output:
        _print_json(operators)
        return 0

    table = Table(title=f"Operators ({len(operators)})")
    table.add_column("Name", style="cyan")
    table.add_column("Category")
    table.add_column("Negation", style="dim")
    table.add_column("Field types")
    for op in operators:
        table.add_row(op["name"], op["category"], op["negation"] or "-", ", ".join(op["acceptedFieldTypes"]))
    console.print(table)
    return 0


HANDLERS = {
    "evaluate": handle_evaluate,
    "introspect": handle_introspect,
    "validate": handle_validate,
    "operators": handle_operators,
}


def main(argv=None) -> int:
    """Main entry point."""
    # Parse CLI arguments FIRST (before any config or logging)
    args = parse_cli_args(argv)

    setup_logger(log_level=args.log_level)

    handler = HANDLERS.get(args.command)
    if handler is None:
        console.print("[yellow]Usage: rule_engine_cli.py {evaluate|introspect|validate|operators} --help[/]")
        return 1

    engine = RuleEngine()
    try:
        return handler(engine, args)
    except RuleEngineError as e:
        console.print(f"\n[bold red]FAIL {e}[/]")
        return 1
    except (OSError, ValueError, yaml.YAMLError) as e:
        console.print(f"\n[bold red]Could not load input:[/] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
