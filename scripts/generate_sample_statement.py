#!/usr/bin/env python3
"""Generate a sample statement file and expected payments for manual checks.

Writes ``local/statement.cfonb120`` and ``local/expected_payments.json``,
ready to be fed to ``cfonb-recon``.
"""

import argparse
import json
from datetime import date
from pathlib import Path

from cfonb_recon.scenarios import ReconciliationScenario
from cfonb_recon.sinks.serialization import to_dict


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Generate a sample CFONB120 statement file")
    parser.add_argument("--output-dir", type=Path, default=Path("local"), help="Output directory")
    parser.add_argument("--accounts", type=int, default=3, help="Number of accounts")
    parser.add_argument("--days", type=int, default=2, help="Statements per account")
    parser.add_argument("--movements", type=int, default=5, help="Movements per statement")
    parser.add_argument("--unmatched-rate", type=float, default=0.2, help="Share of credits left unmatched")
    parser.add_argument("--decoys", type=int, default=3, help="Expected payments matching nothing")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    return parser.parse_args()


def main() -> None:
    """Generate the sample files."""
    args = parse_args()
    args.output_dir.mkdir(parents=True, exist_ok=True)

    scenario = ReconciliationScenario(
        num_accounts=args.accounts,
        statements_per_account=args.days,
        movements_per_statement=args.movements,
        unmatched_rate=args.unmatched_rate,
        num_decoys=args.decoys,
        reference_date=date.today(),
        seed=args.seed,
    )
    data = scenario.generate()

    statement_path = args.output_dir / "statement.cfonb120"
    statement_path.write_text(data.content, encoding="utf-8")

    payments_path = args.output_dir / "expected_payments.json"
    with open(payments_path, "w", encoding="utf-8") as f:
        json.dump([to_dict(p) for p in data.expected_payments], f, indent=2, ensure_ascii=False)

    print("=" * 60)
    print("Sample reconciliation data")
    print("=" * 60)
    print(f"{'Accounts:':22}{len(data.account_ids)}")
    print(f"{'Statements:':22}{data.statement_count}")
    print(f"{'Expected payments:':22}{len(data.expected_payments)}")
    print(f"{'Expected matched:':22}{data.expected_matched}")
    print(f"{'Expected unmatched:':22}{data.expected_unmatched}")
    print(f"\nStatement: {statement_path}")
    print(f"Payments:  {payments_path}")
    print("=" * 60)


if __name__ == "__main__":
    main()
