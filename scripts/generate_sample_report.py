#!/usr/bin/env python3
"""Generate a sample portfolio and write its analytics snapshots.

Runs the client portfolio scenario, aggregates each client and the whole
workspace, and writes report input JSON to the output directory: snapshots,
a date-range workspace report, due-date alerts, projected premium schedules
and the payment audit log.
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from premium_engine.analytics import PortfolioAnalyticsAggregator, classify_due_policies
from premium_engine.config import EngineConfig, ScenarioConfig
from premium_engine.logging import get_logger, setup_logging
from premium_engine.models import PolicyStatus
from premium_engine.scenarios import ClientPortfolioScenario
from premium_engine.schedule import policy_schedule
from premium_engine.sinks import ConsoleSink, JsonFileSink
from premium_engine.sinks.serialization import serialize_value

logger = get_logger(__name__)


def main() -> None:
    """Main entry point."""
    config = EngineConfig.from_env()

    parser = argparse.ArgumentParser(description="Generate sample premium analytics reports")
    parser.add_argument("--clients", type=int, default=25, help="Number of clients (default: 25)")
    parser.add_argument("--max-policies", type=int, default=4, help="Max policies per client (default: 4)")
    parser.add_argument("--history", type=int, default=18, help="Months of payment history (default: 18)")
    parser.add_argument("--seed", type=int, default=config.seed if config.seed is not None else 42)
    parser.add_argument(
        "--reference-date",
        type=date.fromisoformat,
        default=None,
        help="Report date as YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--from",
        dest="range_from",
        type=date.fromisoformat,
        default=None,
        help="Start of the range report as YYYY-MM-DD (default: 11 months before the report date)",
    )
    parser.add_argument("--installments", type=int, default=4, help="Installments per projected schedule (default: 4)")
    parser.add_argument("--output-dir", type=Path, default=config.output.json_output_dir)
    parser.add_argument("--console", action="store_true", help="Print the workspace snapshot to stdout")
    parser.add_argument("--log-level", default=config.log_level)
    args = parser.parse_args()

    setup_logging(args.log_level, config.log_format)
    reference_date = args.reference_date or date.today()

    scenario = ClientPortfolioScenario(
        seed=args.seed,
        reference_date=reference_date,
        config=ScenarioConfig(
            name="sample-report",
            num_clients=args.clients,
            max_policies_per_client=args.max_policies,
            months_of_history=args.history,
        ),
    )
    store = scenario.generate()
    aggregator = PortfolioAnalyticsAggregator()

    sink = JsonFileSink(args.output_dir, pretty=config.output.pretty_json)
    workspace = store.snapshot(aggregator, reference_date)
    sink.write_snapshot("workspace", workspace)
    for client_id in store.clients:
        sink.write_snapshot(f"client_{client_id}", store.snapshot_for_client(client_id, aggregator, reference_date))

    range_report = aggregator.range_report(store.policies.values(), store.payments, args.range_from, reference_date)
    sink.write_snapshot("workspace_range", range_report)

    alerts = classify_due_policies(
        store.policies.values(),
        today=reference_date,
        due_soon_days=config.alerts.due_soon_days,
        upcoming_days=config.alerts.upcoming_days,
    )
    sink.write_batch("alerts", [serialize_value(alerts, decimal_as_number=True)])

    schedules = []
    for policy in store.policies.values():
        if policy.status != PolicyStatus.ACTIVE:
            continue
        for entry in policy_schedule(policy, args.installments, config.schedule, today=reference_date):
            schedules.append({"policy_id": policy.policy_id, **serialize_value(entry, decimal_as_number=True)})
    sink.write_batch("schedule", schedules)
    sink.write_batch("audit_log", store.audit_log)
    sink.close()

    if args.console:
        console = ConsoleSink()
        console.write_snapshot("workspace", workspace)
        console.close()

    logger.info(
        "Wrote reports for %d clients (%d policies, %d payments) to %s",
        len(store.clients),
        len(store.policies),
        len(store.payments),
        args.output_dir,
    )


if __name__ == "__main__":
    main()
