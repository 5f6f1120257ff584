"""CLI entry points."""

from pathlib import Path
from typing import Dict, List, Optional, Sequence
import argparse
import asyncio
import logging

import pandas as pd

from betrisk.client import build_transport
from betrisk.config import Config
from betrisk.constants import INPUT_FIELDS, MODEL_LABELS, MODEL_NAMES, WIRE_FIELD_NAMES
from betrisk.exceptions import ConfigurationError
from betrisk.models.types import RawInput
from betrisk.ops import get_metrics_recorder
from betrisk.ops.logging import configure_logging
from betrisk.reporting import format_state, write_results_csv
from betrisk.submission import Failed, SubmissionController, Success

logger = logging.getLogger(__name__)

# CSV headers accepted for each input field
_COLUMN_ALIASES: Dict[str, str] = {}
for _field, _wire in WIRE_FIELD_NAMES.items():
    _COLUMN_ALIASES[_field] = _field
    _COLUMN_ALIASES[_wire] = _field


def _load_config(config_path: Optional[str]) -> Optional[Config]:
    try:
        config = Config.load(config_path)
    except (ConfigurationError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return None
    configure_logging(config.log_level)
    return config


def _result_row(index: int, raw: RawInput, state) -> Dict:
    row = {"row": index}
    row.update({field: getattr(raw, field) for field in INPUT_FIELDS})
    if isinstance(state, Success):
        row.update({
            "status": "success",
            "tier": state.assessment.tier.label,
            "cluster": state.assessment.cluster,
            "confidence_percent": round(state.assessment.confidence_percent, 1),
            "error": "",
        })
    elif isinstance(state, Failed):
        row.update({
            "status": state.kind,
            "tier": "",
            "cluster": "",
            "confidence_percent": "",
            "error": str(state.error),
        })
    return row


def read_batch_inputs(input_path: str, default_model: str) -> List[RawInput]:
    """Read one RawInput per CSV row, keeping every cell as text."""
    frame = pd.read_csv(input_path, dtype=str, keep_default_na=False)
    frame = frame.rename(columns=lambda name: _COLUMN_ALIASES.get(str(name).strip(), name))
    if "model_name" not in frame.columns:
        frame["model_name"] = default_model
    for field in INPUT_FIELDS:
        if field not in frame.columns:
            frame[field] = ""

    return [
        RawInput(**{field: record[field] for field in INPUT_FIELDS})
        for record in frame[INPUT_FIELDS].to_dict(orient="records")
    ]


def run_assess(
    bet: str = "",
    total_games: str = "",
    total_profit: str = "",
    total_losses: str = "",
    cashed_out: str = "",
    model_name: Optional[str] = None,
    config_path: Optional[str] = None,
) -> int:
    config = _load_config(config_path)
    if config is None:
        return 1

    raw = RawInput(
        bet=bet,
        total_games=total_games,
        total_profit=total_profit,
        total_losses=total_losses,
        cashed_out=cashed_out,
        model_name=model_name if model_name is not None else config.default_model,
    )
    transport = build_transport(config)
    try:
        state = asyncio.run(SubmissionController(transport).submit(raw))
    finally:
        transport.close()
    print(format_state(state))
    return 0 if isinstance(state, Success) else 1


async def _assess_batch(controller: SubmissionController, inputs: List[RawInput]) -> List[Dict]:
    rows = []
    for index, raw in enumerate(inputs, start=1):
        # Awaited one at a time so no row supersedes another
        state = await controller.submit(raw)
        rows.append(_result_row(index, raw, state))
    return rows


def run_assess_batch(
    input_path: str,
    output_path: str,
    model_name: Optional[str] = None,
    config_path: Optional[str] = None,
) -> int:
    config = _load_config(config_path)
    if config is None:
        return 1
    if not Path(input_path).exists():
        logger.error("Input file not found: %s", input_path)
        return 1

    try:
        inputs = read_batch_inputs(input_path, model_name or config.default_model)
    except pd.errors.EmptyDataError:
        logger.error("Input file is empty: %s", input_path)
        return 1
    logger.info("Assessing %d rows from %s", len(inputs), input_path)

    transport = build_transport(config)
    try:
        rows = asyncio.run(_assess_batch(SubmissionController(transport), inputs))
    finally:
        transport.close()
    write_results_csv(rows, output_path)

    succeeded = sum(1 for row in rows if row["status"] == "success")
    logger.info("Wrote %d results to %s (%d succeeded)", len(rows), output_path, succeeded)
    logger.debug("Metrics: %s", get_metrics_recorder().snapshot())
    return 0 if succeeded == len(rows) else 1


def run_list_models() -> int:
    for name in MODEL_NAMES:
        print(f"{name:<12} {MODEL_LABELS[name]}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="betrisk", description="Gambling behaviour risk assessment")
    subparsers = parser.add_subparsers(dest="command", required=True)

    assess = subparsers.add_parser("assess", help="Assess a single set of metrics")
    assess.add_argument("--config", dest="config_path", help="Path to .env or JSON config file")
    assess.add_argument("--bet", dest="bet", default="", help="Bet amount")
    assess.add_argument("--total-games", dest="total_games", default="", help="Total games played")
    assess.add_argument("--total-profit", dest="total_profit", default="", help="Total profit")
    assess.add_argument("--total-losses", dest="total_losses", default="", help="Total losses")
    assess.add_argument("--cashed-out", dest="cashed_out", default="", help="Amount cashed out")
    assess.add_argument("--model", dest="model_name", help="Model identifier (see list-models)")

    batch = subparsers.add_parser("assess-batch", help="Assess every row of a CSV file")
    batch.add_argument("--config", dest="config_path", help="Path to .env or JSON config file")
    batch.add_argument("--input", dest="input_path", required=True, help="Input CSV")
    batch.add_argument("--output", dest="output_path", required=True, help="Output CSV")
    batch.add_argument("--model", dest="model_name", help="Model for rows without a model_name column")

    subparsers.add_parser("list-models", help="List supported models")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "assess":
        return run_assess(
            bet=args.bet,
            total_games=args.total_games,
            total_profit=args.total_profit,
            total_losses=args.total_losses,
            cashed_out=args.cashed_out,
            model_name=getattr(args, "model_name", None),
            config_path=getattr(args, "config_path", None),
        )
    if args.command == "assess-batch":
        return run_assess_batch(
            input_path=args.input_path,
            output_path=args.output_path,
            model_name=getattr(args, "model_name", None),
            config_path=getattr(args, "config_path", None),
        )
    if args.command == "list-models":
        return run_list_models()

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
