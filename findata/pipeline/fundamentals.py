"""Value-investing scorecard over the latest financial metrics.

Checks applied to the most recent record (points in brackets):

    return on equity     > 15%        [2]
    debt to equity       < 0.5        [2]
    operating margin     > 15%        [2]
    current ratio        > 1.5        [1]
    P/E                  in (0, 25)   [1]
    P/B                  in (0, 3)    [1]

A ratio the server did not report is called out as unavailable rather than
scored as zero. P/E and P/B are only mentioned when positive.
"""

from typing import List

from findata.core.logger import logger
from findata.models.datatypes import FinancialMetrics, FundamentalAnalysis

MAX_SCORE = 9


def analyze_fundamentals(metrics: List[FinancialMetrics]) -> FundamentalAnalysis:
    """Score ``metrics[0]`` and explain each criterion.

    Args:
        metrics: Metrics records, newest first.

    Returns:
        :class:`FundamentalAnalysis`; ``error`` is set when ``metrics`` is empty.
    """
    if not metrics:
        logger.warning("analyze_fundamentals: no metrics supplied")
        return FundamentalAnalysis(
            score=0,
            details="Insufficient fundamental data",
            error="No financial metrics provided",
        )

    latest = metrics[0]
    score = 0
    reasons: List[str] = []

    if latest.return_on_equity is None:
        reasons.append("ROE data unavailable")
    elif latest.return_on_equity > 0.15:
        score += 2
        reasons.append(f"Strong ROE of {latest.return_on_equity * 100:.1f}%")
    else:
        reasons.append(f"Weak ROE of {latest.return_on_equity * 100:.1f}%")

    if latest.debt_to_equity is None:
        reasons.append("Debt to equity data unavailable")
    elif latest.debt_to_equity < 0.5:
        score += 2
        reasons.append("Conservative debt levels")
    else:
        reasons.append(f"High debt to equity ratio of {latest.debt_to_equity:.1f}")

    if latest.operating_margin is None:
        reasons.append("Operating margin data unavailable")
    elif latest.operating_margin > 0.15:
        score += 2
        reasons.append("Strong operating margins")
    else:
        reasons.append(f"Weak operating margin of {latest.operating_margin * 100:.1f}%")

    if latest.current_ratio is None:
        reasons.append("Current ratio data unavailable")
    elif latest.current_ratio > 1.5:
        score += 1
        reasons.append("Good liquidity position")
    else:
        reasons.append(f"Weak liquidity with current ratio of {latest.current_ratio:.1f}")

    pe = latest.price_to_earnings_ratio
    if 0 < pe < 25:
        score += 1
        reasons.append(f"Reasonable P/E ratio of {pe:.1f}")
    elif pe > 0:
        reasons.append(f"High P/E ratio of {pe:.1f}")

    pb = latest.price_to_book_ratio
    if 0 < pb < 3:
        score += 1
        reasons.append(f"Reasonable P/B ratio of {pb:.1f}")
    elif pb > 0:
        reasons.append(f"High P/B ratio of {pb:.1f}")

    summary = {
        "ticker": latest.ticker,
        "return_on_equity": latest.return_on_equity,
        "debt_to_equity": latest.debt_to_equity,
        "operating_margin": latest.operating_margin,
        "current_ratio": latest.current_ratio,
        "pe_ratio": pe,
        "pb_ratio": pb,
        "market_cap": latest.market_cap,
        "report_period": latest.report_period,
    }

    logger.info(f"analyze_fundamentals: {latest.ticker} scored {score}/{MAX_SCORE}")
    return FundamentalAnalysis(score=score, details="; ".join(reasons), metrics=summary)
