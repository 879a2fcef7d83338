"""
Recipe Pipeline command line.

Parses recipe text files into structured JSON and scales recipes (text or
JSON) to a new size.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import voluptuous as vol

from .config import PipelineConfig, load_config
from .const import AVAILABLE_MODELS
from .exceptions import RecipePipelineError
from .models.recipe import ScaleConstraint, ScaleRequest
from .services.ai_scaling import RecipeScalingService
from .services.recipe_service import RecipeParsingService

_LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def read_source(source: str) -> str:
    """Read recipe input from a file path, or from stdin when source is '-'."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def load_recipe_source(text: str) -> Any:
    """Return a JSON recipe payload when the input is JSON, else the raw text."""
    stripped = text.lstrip()
    if stripped.startswith("{"):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            _LOGGER.debug("Input starts with '{' but is not JSON, treating it as text")
    return text


def write_output(data: dict[str, Any], output: Path | None) -> None:
    """Print the JSON result, or save it when an output file is given."""
    content = json.dumps(data, indent=2, ensure_ascii=False)
    if output is None:
        print(content)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content + "\n", encoding="utf-8")
    _LOGGER.info("Saved result to: %s", output)


def run_parse(args: argparse.Namespace, config: PipelineConfig) -> dict[str, Any]:
    """Parse a recipe text file."""
    text = read_source(args.file)
    service = RecipeParsingService(config)
    return service.parse_with_metadata(text, force_ai=args.force_ai)


def run_scale(args: argparse.Namespace, config: PipelineConfig) -> dict[str, Any]:
    """Scale a recipe given as text or as JSON."""
    source = load_recipe_source(read_source(args.file))
    service = RecipeScalingService(config)

    request = None
    if args.constrain is not None:
        index, quantity = args.constrain
        request = ScaleRequest(constraint=ScaleConstraint(
            ingredient_index=index, target_quantity=quantity))

    scaled = service.scale(
        source,
        multiplier=args.multiply,
        divisor=args.divide,
        target_yield=args.target_yield,
        target_yield_unit=args.target_yield_unit,
        request=request,
        use_ai=args.ai,
        force_ai=args.force_ai,
    )
    return scaled.to_dict()


def _constraint_arg(values: list[str]) -> tuple[int, float]:
    index, quantity = values
    return int(index), float(quantity)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the recipe-pipeline command."""
    parser = argparse.ArgumentParser(
        prog="recipe-pipeline",
        description="Parse recipe text into structured JSON and scale recipes"
    )
    parser.add_argument(
        "--api-key",
        help="API key for the AI service (can also be set via GEMINI_API_KEY env var)"
    )
    parser.add_argument(
        "--model",
        help=f"Model to use for AI requests (e.g. {', '.join(AVAILABLE_MODELS)})"
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Save the JSON result to this file instead of printing it"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser("parse", help="Parse a recipe text file")
    parse_parser.add_argument("file", help="Recipe text file, or '-' for stdin")
    parse_parser.add_argument(
        "--force-ai",
        action="store_true",
        help="Fail instead of falling back to heuristics when AI parsing fails"
    )
    parse_parser.set_defaults(handler=run_parse)

    scale_parser = subparsers.add_parser("scale", help="Scale a recipe")
    scale_parser.add_argument(
        "file", help="Recipe text or JSON file, or '-' for stdin")
    mode = scale_parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--multiply", type=float, help="Multiply all quantities by X")
    mode.add_argument("--divide", type=float, help="Divide all quantities by X")
    mode.add_argument("--target-yield", type=float, help="Scale to yield X")
    mode.add_argument(
        "--constrain",
        nargs=2,
        metavar=("INDEX", "QTY"),
        help="Scale so ingredient INDEX (0-based) uses QTY of its unit"
    )
    scale_parser.add_argument(
        "--target-yield-unit", help="Yield unit to show on the scaled recipe")
    scale_parser.add_argument(
        "--ai", action="store_true", help="Ask the AI service to scale the recipe")
    scale_parser.add_argument(
        "--force-ai",
        action="store_true",
        help="Fail instead of falling back to the scaling engine when AI scaling fails"
    )
    scale_parser.set_defaults(handler=run_scale)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the recipe pipeline."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT
    )

    if args.command == "scale" and args.constrain is not None:
        try:
            args.constrain = _constraint_arg(args.constrain)
        except ValueError:
            parser.error("--constrain expects an integer INDEX and a numeric QTY")

    try:
        config = load_config(api_key=args.api_key, model=args.model)
    except vol.Invalid as e:
        _LOGGER.error("Invalid configuration: %s", str(e))
        sys.exit(2)

    try:
        result = args.handler(args, config)
        write_output(result, args.output)
    except OSError as e:
        _LOGGER.error("Could not read or write recipe file: %s", str(e))
        sys.exit(1)
    except RecipePipelineError as e:
        _LOGGER.error("Error processing recipe: %s", str(e), exc_info=True)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
