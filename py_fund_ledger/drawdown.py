from typing import List

import numpy as np
import pandas as pd

from .types import DrawdownPoint, EquityPoint


def equity_frame(points: List[EquityPoint]) -> pd.DataFrame:
    """
    Equity curve as a DataFrame with the running peak and percent drawdown.
    Columns: date, Equity, Peak_Equity, Drawdown_Pct
    """
    df = pd.DataFrame({
        'date': [p.date for p in points],
        'Equity': [float(p.value) for p in points],
    })
    if df.empty:
        df['Peak_Equity'] = pd.Series(dtype=float)
        df['Drawdown_Pct'] = pd.Series(dtype=float)
        return df

    # First point defines the initial peak
    df['Peak_Equity'] = df['Equity'].cummax()

    # Avoid div by zero: no positive peak yet means no drawdown
    peak = df['Peak_Equity']
    safe_peak = peak.where(peak > 0, 1.0)
    df['Drawdown_Pct'] = np.where(peak > 0, (df['Equity'] - peak) / safe_peak * 100, 0.0)
    return df


def compute_drawdown(points: List[EquityPoint]) -> List[DrawdownPoint]:
    """ Percent decline from the running peak, aligned 1:1 with the equity points. """
    df = equity_frame(points)
    return [
        DrawdownPoint(date=d, percent=float(pct))
        for d, pct in zip(df['date'], df['Drawdown_Pct'])
    ]


def max_drawdown(series: List[DrawdownPoint]) -> float:
    if not series:
        return 0.0
    return min(p.percent for p in series)
