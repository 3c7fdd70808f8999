#!/usr/bin/env python3
"""Simulate a wallet portfolio and publish its amortization statements.

Contracts synthetic wallets, replays borrower payments (full, partial and
early), and sends one audit event per statement to the configured sink:
- console: pretty-printed JSON on stdout
- json: JSON Lines file under OUTPUT_DIR
- kafka: the AUDIT_TOPIC topic on KAFKA_BOOTSTRAP_SERVERS

Configuration comes from the environment (see LoanWalletConfig.from_env);
command-line flags override it.
"""

import argparse
import logging
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_wallet.config import LoanWalletConfig
from loan_wallet.exceptions import LoanWalletError
from loan_wallet.logging import setup_logging
from loan_wallet.models.enums import ScheduleCurve
from loan_wallet.scenarios import WalletPortfolioScenario
from loan_wallet.sinks import create_sink

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--wallets", type=int, default=50, help="Number of wallets")
    parser.add_argument("--index-linked-rate", type=float, default=0.3)
    parser.add_argument("--partial-rate", type=float, default=0.10)
    parser.add_argument("--early-rate", type=float, default=0.05)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--sink", choices=["console", "json", "kafka"], default=None)
    parser.add_argument("--curve", choices=[c.value for c in ScheduleCurve], default=None)
    parser.add_argument("--interest-rate", type=Decimal, default=None)
    parser.add_argument("--log-format", choices=["standard", "json"], default="standard")
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    try:
        config = LoanWalletConfig.from_env()
    except LoanWalletError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    if args.seed is not None:
        config.seed = args.seed
    if args.sink is not None:
        config.audit.sink = args.sink
    if args.curve is not None:
        config.schedule_curve = ScheduleCurve(args.curve)
    if args.interest_rate is not None:
        config.interest_rate = args.interest_rate

    setup_logging(config.log_level, args.log_format)

    scenario = WalletPortfolioScenario(
        num_wallets=args.wallets,
        index_linked_rate=args.index_linked_rate,
        partial_rate=args.partial_rate,
        early_rate=args.early_rate,
        seed=config.seed,
        config=config,
    )
    result = scenario.generate()

    sink = create_sink(config)
    try:
        sink.write_batch(config.audit.topic, result.events)
    finally:
        sink.close()

    logger.info(
        "Published %d statements for %d wallets (%d validation failures)",
        len(result.events),
        len(result.wallets),
        len(result.failures),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
