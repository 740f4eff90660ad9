#!/usr/bin/env python3
"""
Walk a demo session through the dashboard client layer and print each stage.

Logs in with a demo account (no network), then lists buckets, creates one,
bumps its priority, lists transactions, reads the summary and asks the
assistant a question.

Usage (from repo root):
  python scripts/run_demo.py
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from finbins.auth.session import AuthService
from finbins.chatbot.assistant import AssistantService
from finbins.database.local_storage import open_storage
from finbins.error_handler import ErrorHandler
from finbins.integrations.dispatcher import RequestDispatcher
from finbins.integrations.policy.finance_service import FinanceService, priority_label
from finbins.integrations.policy.response_wrappers import ApiError
from finbins.utils.config_loader import load_client_config


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data: dict | list | str):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


async def main():
    setup_logging()
    config = load_client_config()
    dispatcher = RequestDispatcher(open_storage(config.storage.path), config=config)
    auth = AuthService(dispatcher)
    finance = FinanceService(dispatcher)
    assistant = AssistantService(dispatcher)
    errors = ErrorHandler()

    session = await auth.login("demo@example.com", "password123")
    print_stage("LOGIN", {"user_id": session.user_id, "synthetic": session.is_synthetic})

    buckets = await finance.list_buckets()
    print_stage(
        "BUCKETS (by priority)",
        [f"{b.name}: {b.current_saved_amount:.0f}/{b.target_amount:.0f} [{priority_label(b.priority_score)}]" for b in buckets],
    )

    created = await finance.create_bucket("House Deposit", "60000", "2030-01-01T00:00:00.000Z", priority_score=0.8)
    print_stage("CREATED BUCKET", created.to_wire())

    await finance.adjust_priority(created, step=0.1)
    print_stage("AFTER PRIORITY BUMP", [b.to_wire() for b in await finance.list_buckets()])

    transactions = await finance.list_transactions()
    print_stage("TRANSACTIONS", [t.to_wire() for t in transactions])

    summary = await finance.get_financial_summary()
    print_stage(
        "SUMMARY",
        {"income": summary.total_income, "expenses": summary.total_expenses, "savings": summary.savings_balance},
    )

    print_stage("ASSISTANT", await assistant.ask("How can I save more each month?"))

    try:
        await finance.delete_bucket(9999)
    except ApiError as exc:
        print_stage("EXPECTED ERROR", errors.to_notice(exc))


if __name__ == "__main__":
    asyncio.run(main())
