from draws.schema import DrawRecord, LottoGame
from draws.service import Outcome, ScrapedResult, build_result, fetch_lottery_data
from draws.validate import sort_draws, validate_draws

__all__ = [
    "DrawRecord",
    "LottoGame",
    "Outcome",
    "ScrapedResult",
    "build_result",
    "fetch_lottery_data",
    "sort_draws",
    "validate_draws",
]
