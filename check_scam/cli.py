import argparse
import logging
from pathlib import Path

from .bootstrap import initialize
from .config import ProviderConfig, settings
from .infrastructure import GeminiOracle
from .risk import RiskAggregator, apply_oracle
from .utils import read_phone_list, write_results

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Assess scam risk of phone numbers")
    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        required=True,
        help="Input file with phone numbers",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV path",
    )
    parser.add_argument(
        "--oracle",
        action="store_true",
        help="Also ask the generative oracle about each number",
    )
    return parser.parse_args(argv)


def run(argv: list[str] | None = None, aggregator: RiskAggregator | None = None) -> int:
    initialize()
    args = parse_args(argv)

    if not args.input.exists():
        logger.error("Input file not found: %s", args.input)
        return 1

    phones = read_phone_list(args.input)
    logger.info("Loaded %d numbers from %s", len(phones), args.input)

    config = ProviderConfig.from_settings(settings)
    if aggregator is None:
        aggregator = RiskAggregator(config)
    oracle = GeminiOracle(config) if args.oracle else None

    results = []
    for raw in phones:
        canonical = aggregator.normalize(raw)
        verdict = aggregator.assess(canonical)
        if oracle is not None:
            verdict = apply_oracle(verdict, oracle.is_scam(canonical))
        results.append((raw, canonical, verdict))

    write_results(args.output, results)
    logger.info("Results saved to %s", args.output)
    return 0


def main(argv: list[str] | None = None) -> int:
    return run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
