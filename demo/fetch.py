import argparse
import logging
import os
from datetime import date
from typing import List, Optional

from config import ConfigError, load_config, safe_config_summary
from draws.export import ALL_GAMES, export_csv, export_filename, filter_by_game
from draws.presets import PRESET_OFFSETS, preset_range, validate_range
from draws.schema import GAME_NAMES
from draws.service import ScrapedResult, build_result, fetch_lottery_data


logger = logging.getLogger("demo.fetch")


def _format_draw_line(draw) -> str:
    numbers = " ".join(f"{n:02d}" for n in draw.numbers) or "-"
    line = f"{draw.date:<12} {draw.game.value:<16} {numbers}"
    if draw.bonus_ball is not None:
        line += f"  bonus={draw.bonus_ball}"
    if draw.power_ball is not None:
        line += f"  powerball={draw.power_ball}"
    if draw.jackpot_amount:
        line += f"  jackpot=R{draw.jackpot_amount:,.2f}"
    return line


def _print_result(result: ScrapedResult, game: str) -> None:
    draws = filter_by_game(result.draws, game)
    for draw in draws:
        print(_format_draw_line(draw))
    if result.sources:
        print("Sources:")
        for source in result.sources:
            print(f"  {source.title or source.uri} <{source.uri}>")
    if result.error_detail:
        print(f"ERROR: {result.error_detail}")
    elif result.advisory:
        print(result.advisory)
    else:
        suffix = " (repaired)" if result.repaired else ""
        print(f"OK {len(draws)} of {len(result.draws)} draws{suffix}")


def _resolve_range(args: argparse.Namespace) -> tuple:
    if args.preset:
        reference = date.fromisoformat(args.reference) if args.reference else None
        return preset_range(args.preset, reference)
    if args.raw_file and not (args.start or args.end):
        return "unknown", "unknown"
    if not args.start or not args.end:
        raise ValueError("Provide --start and --end, or --preset.")
    validate_range(args.start, args.end)
    return args.start, args.end


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Fetch SA Lotto draw results for a date range.")
    parser.add_argument("--start", help="Start date (YYYY-MM-DD).")
    parser.add_argument("--end", help="End date (YYYY-MM-DD).")
    parser.add_argument("--preset", choices=sorted(PRESET_OFFSETS), help="Relative range instead of --start/--end.")
    parser.add_argument("--reference", help="Reference date for --preset (default today).")
    parser.add_argument("--game", default=ALL_GAMES, choices=[ALL_GAMES] + GAME_NAMES)
    parser.add_argument("--csv", help="Write the filtered draws to this CSV path.")
    parser.add_argument("--csv-dir", help="Write the filtered draws to a generated file name in this directory.")
    parser.add_argument("--raw-file", help="Process a saved response payload instead of calling the API.")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

    try:
        start, end = _resolve_range(args)
        if args.raw_file:
            with open(args.raw_file, "r", encoding="utf-8") as handle:
                result = build_result(handle.read())
        else:
            config = load_config()
            logger.info("Loaded config: %s", safe_config_summary(config))
            result = fetch_lottery_data(start, end, config=config)
    except (ConfigError, ValueError, OSError) as exc:
        print(str(exc))
        return 1

    _print_result(result, args.game)
    if result.error_detail:
        return 1

    csv_path = args.csv
    if not csv_path and args.csv_dir:
        csv_path = os.path.join(args.csv_dir, export_filename(args.game, start, end))
    if csv_path:
        written = export_csv(filter_by_game(result.draws, args.game), csv_path)
        print(f"Wrote {written}" if written else "Nothing to export.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
