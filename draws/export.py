from __future__ import annotations

import csv
import logging
import os
import re
from typing import Iterable, List, Optional

import pandas as pd

from draws.schema import DrawRecord, LottoGame
from draws.validate import parse_draw_date


logger = logging.getLogger(__name__)

ALL_GAMES = "All"
CSV_COLUMNS = ["Date", "Game", "Winning Numbers", "Bonus/PowerBall", "Jackpot Amount (ZAR)"]


def filter_by_game(draws: Iterable[DrawRecord], game: Optional[str] = ALL_GAMES) -> List[DrawRecord]:
    if game is None or game == ALL_GAMES:
        return list(draws)
    selected = LottoGame.lookup(game)
    if selected is None:
        raise ValueError(f"Unknown game: {game}")
    return [draw for draw in draws if draw.game is selected]


def _display_date(value: str) -> str:
    parsed = parse_draw_date(value)
    if parsed is None:
        return value
    return parsed.strftime("%Y/%m/%d")


def draws_to_frame(draws: Iterable[DrawRecord]) -> pd.DataFrame:
    rows = []
    for draw in draws:
        special = draw.special_ball
        rows.append(
            {
                "Date": _display_date(draw.date),
                "Game": draw.game.value,
                "Winning Numbers": "-".join(str(n) for n in draw.numbers),
                "Bonus/PowerBall": "" if special is None else str(special),
                "Jackpot Amount (ZAR)": draw.jackpot_amount or 0,
            }
        )
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def export_filename(game: Optional[str], start_date: str, end_date: str) -> str:
    label = re.sub(r"\s", "_", (game or ALL_GAMES).lower())
    return f"sa_lotto_results_{label}_{start_date}_to_{end_date}.csv"


def export_csv(draws: Iterable[DrawRecord], path: str) -> Optional[str]:
    frame = draws_to_frame(draws)
    if frame.empty:
        logger.info("No draws to export; skipping %s", path)
        return None
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    frame.to_csv(path, index=False, quoting=csv.QUOTE_ALL)
    logger.info("Wrote %d draws to %s", len(frame), path)
    return path
