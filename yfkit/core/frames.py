"""
Tabular views of mapped entities using pandas.
"""

from typing import Sequence

import pandas as pd

from yfkit.core.fundamentals import FinancialStatement
from yfkit.core.models import ActionsData, HistoricalSeries, OptionChain

HISTORY_COLUMNS = ["open", "high", "low", "close", "adj_close", "volume"]


def _datetime_index(timestamps: Sequence[int]) -> pd.DatetimeIndex:
    return pd.DatetimeIndex(pd.to_datetime(list(timestamps), unit="s", utc=True), name="date")


def series_to_frame(series: HistoricalSeries) -> pd.DataFrame:
    """
    Convert a HistoricalSeries to an OHLCV DataFrame indexed by UTC datetime.

    Gap bars are kept as rows of NaN so the index matches the upstream bars.
    """
    rows = [q.model_dump(exclude={"timestamp"}) for q in series.quotes]
    df = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    df.index = _datetime_index([q.timestamp for q in series.quotes])
    return df


def actions_to_frame(actions: ActionsData) -> pd.DataFrame:
    """One row per corporate action with dividend and split columns."""
    rows = []
    for action in actions.actions:
        rows.append({
            "dividends": getattr(action, "amount", None) if action.kind == "dividend" else None,
            "stock_splits": getattr(action, "ratio", None),
            "capital_gains": getattr(action, "amount", None) if action.kind == "capital_gain" else None,
        })
    df = pd.DataFrame(rows, columns=["dividends", "stock_splits", "capital_gains"])
    df.index = _datetime_index([a.timestamp for a in actions.actions])
    return df


def statement_to_frame(statement: FinancialStatement) -> pd.DataFrame:
    """Line items as rows, periods as columns (newest first)."""
    df = pd.DataFrame(statement.data)
    if df.empty:
        return df
    return df[sorted(df.columns, reverse=True)].sort_index()


def option_chain_to_frame(chain: OptionChain) -> pd.DataFrame:
    """Calls and puts stacked, with a ``side`` column."""
    rows = [dict(c.model_dump(), side="call") for c in chain.calls]
    rows += [dict(p.model_dump(), side="put") for p in chain.puts]
    return pd.DataFrame(rows)
