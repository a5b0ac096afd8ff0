from demo import fetch


RAW = (
    '```json\n{"draws":[{"id":"1","game":"Lotto","date":"2026-02-04","numbers":[3,11,19,27,35,49],"bonusBall":8},'
    '{"id":"2","game":"PowerBall","date":"2026-02-06","numbers":[5,10,15,20,25],"powerBall":4},'
    '{"id":"3","game":"Lotto","date":"2026-02-01","numbers":[1,2'
)


def test_raw_file_prints_sorted_draws(tmp_path, capsys):
    raw_path = tmp_path / "response.txt"
    raw_path.write_text(RAW, encoding="utf-8")

    assert fetch.main(["--raw-file", str(raw_path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("2026-02-06")
    assert "powerball=4" in lines[0]
    assert lines[2].startswith("2026-02-01")
    assert lines[-1] == "OK 3 of 3 draws (repaired)"


def test_raw_file_with_game_filter_and_csv(tmp_path, capsys):
    raw_path = tmp_path / "response.txt"
    raw_path.write_text(RAW, encoding="utf-8")

    code = fetch.main(
        [
            "--raw-file", str(raw_path),
            "--start", "2026-02-01",
            "--end", "2026-02-07",
            "--game", "Lotto",
            "--csv-dir", str(tmp_path),
        ]
    )
    assert code == 0
    expected = tmp_path / "sa_lotto_results_lotto_2026-02-01_to_2026-02-07.csv"
    assert expected.exists()
    assert len(expected.read_text(encoding="utf-8").splitlines()) == 3
    assert "OK 2 of 3 draws" in capsys.readouterr().out


def test_unrecoverable_raw_file_returns_error(tmp_path, capsys):
    raw_path = tmp_path / "response.txt"
    raw_path.write_text('{"draws":[{"game', encoding="utf-8")
    assert fetch.main(["--raw-file", str(raw_path)]) == 1
    assert "Data stream was interrupted" in capsys.readouterr().out


def test_empty_raw_file_prints_advisory(tmp_path, capsys):
    raw_path = tmp_path / "response.txt"
    raw_path.write_text("", encoding="utf-8")
    assert fetch.main(["--raw-file", str(raw_path)]) == 0
    assert "No official results found" in capsys.readouterr().out


def test_bad_range(capsys):
    assert fetch.main(["--start", "2026-02-08", "--end", "2026-02-01"]) == 1
    assert "start must be <= end" in capsys.readouterr().out


def test_live_fetch_uses_service(monkeypatch, capsys):
    calls = {}

    def fake_fetch(start, end, config=None):
        calls["range"] = (start, end)
        from draws.service import build_result

        return build_result('{"draws": []}')

    monkeypatch.setattr(fetch, "fetch_lottery_data", fake_fetch)
    monkeypatch.setenv("GEMINI_API_KEY", "key")
    assert fetch.main(["--preset", "week", "--reference", "2026-02-07"]) == 0
    assert calls["range"] == ("2026-01-31", "2026-02-07")
