# config.example.py

"""
Documentation-only module (safe to commit).

The CLI reads its defaults from environment variables (optionally via a local .env file).
Command-line flags always win over these values. The library API never reads them.
"""

ENV_VARS = {
    # Logging
    "TICKER_LOG_LEVEL": "Console logging level (default: INFO).",
    "TICKER_LOG_DIR": "Directory for ticker.log (default: .local/ticker).",
    # Run defaults
    "TICKER_INTERVAL_SECONDS": "Seconds between runs (default: 1.0).",
    "TICKER_LIMIT": "Max number of runs; 0 = none, negative = unbounded (default: -1).",
    "TICKER_IMMEDIATE": "Run once before the first interval (true/false, default: false).",
    "TICKER_TIMEOUT_SECONDS": "Stop after this many seconds (default: unset, no timeout).",
}
