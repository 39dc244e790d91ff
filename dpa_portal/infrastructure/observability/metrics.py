"""Prometheus metrics for statements, loan payments and backend ledger health"""

from prometheus_client import Counter, Histogram

# Reporting metrics
statement_counter = Counter(
    "dpa_statement_total",
    "Member statements built",
    ["category"],  # All | Savings | Loans | Shares
)

dashboard_counter = Counter(
    "dpa_dashboard_total",
    "Dashboards computed",
    ["audience"],  # admin | member
)

# Loan metrics
loan_payment_counter = Counter(
    "dpa_loan_payment_total",
    "Partial loan payments by outcome",
    ["outcome"],  # recorded | rejected
)

loan_transition_counter = Counter(
    "dpa_loan_transition_total",
    "Loan status changes relayed to the backend",
    ["action"],  # approve | close
)

# Configuration
financial_year_update_counter = Counter(
    "dpa_financial_year_update_total",
    "Financial year configuration changes by outcome",
    ["outcome"],  # saved | rejected
)

# Backend ledger API
ledger_fetch_failures_counter = Counter(
    "dpa_ledger_fetch_failures_total",
    "Failed backend ledger API calls",
    ["path"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment_outcome(recorded: bool) -> None:
    loan_payment_counter.labels(outcome="recorded" if recorded else "rejected").inc()
