"""Financial data snapshot entry point.

Usage:
    python run_pipeline.py [TICKER ...]

Loads config.yaml, builds the HTTP client, provider and tool engine, then for
each ticker (from the command line, else ``tickers`` in config.yaml) fetches
metrics, market cap and news, scores the fundamentals and archives snapshots.
"""

import sys
from dotenv import load_dotenv

load_dotenv()  # must precede findata imports so env vars are available at module load

from findata.core.config import Settings, load_config  # noqa: E402
from findata.core.http import HTTPClient  # noqa: E402
from findata.core.logger import logger, setup_logger  # noqa: E402
from findata.pipeline.engine import ToolEngine  # noqa: E402
from findata.providers.financial_datasets import FinancialDatasetsProvider  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    """Run the snapshot pass. Returns 0 on success, 1 on configuration failure."""
    argv = sys.argv[1:] if argv is None else argv
    try:
        config = load_config()
    except (FileNotFoundError, ValueError) as exc:
        logger.error(f"run_pipeline: failed to load config: {exc}")
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    settings = Settings.from_config(config)
    setup_logger(settings.output_dir)
    tickers = [t.upper() for t in argv] or [t.upper() for t in config.get("tickers", [])]
    if not tickers:
        print("Usage: python run_pipeline.py <TICKER> [TICKER ...]", file=sys.stderr)
        return 1

    with HTTPClient.from_settings(settings) as client:
        engine = ToolEngine(FinancialDatasetsProvider(client), output_dir=settings.output_dir)
        for ticker in tickers:
            metrics = engine.get_financial_metrics(ticker)
            if metrics.error:
                print(f"{ticker}: FAILED — {metrics.error}")
                continue
            market_cap = engine.get_market_cap(ticker)
            news = engine.get_company_news(ticker)
            analysis = engine.analyze_fundamentals(metrics.metrics)
            print(
                f"{ticker}: market_cap={market_cap.market_cap:,.0f} {market_cap.currency} | "
                f"metrics={metrics.count} | news={news.count} | score={analysis.score}"
            )

    logger.info(f"run_pipeline: completed for {len(tickers)} tickers")
    return 0


if __name__ == "__main__":
    sys.exit(main())
