import json

import pytest

import run_markov

PIGGIES = [
    "This little piggy went to the market",
    "This little piggy stayed home",
    "This little piggy had roast beef",
    "This little piggy had none",
]


@pytest.fixture
def corpus(tmp_path):
    path = tmp_path / "piggies.json"
    path.write_text(json.dumps(PIGGIES), encoding="utf-8")
    return str(path)


def test_prints_requested_count(corpus, capsys):
    run_markov.main(["--corpus", corpus, "--count", "4", "--seed", "3"])
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 4
    assert all(line.startswith("This little piggy") for line in lines)
    for prev, cur in zip(lines, lines[1:]):
        assert prev != cur


def test_seed_is_reproducible(corpus, capsys):
    run_markov.main(["--corpus", corpus, "--count", "3", "--seed", "11"])
    first = capsys.readouterr().out
    run_markov.main(["--corpus", corpus, "--count", "3", "--seed", "11", "--chunked"])
    assert capsys.readouterr().out == first


def test_empty_model_exits_with_message(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("hello\nworld\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        run_markov.main(["--corpus", str(path)])
    assert "No strings to generate from" in str(exc.value.code)


def test_exhausted_retries_exit(tmp_path):
    path = tmp_path / "one.txt"
    path.write_text("only one way\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        run_markov.main(["--corpus", str(path), "--count", "2", "--max-retries", "3"])
    assert "No new sentence" in str(exc.value.code)


def test_undecodable_corpus_still_generates(tmp_path, capsys):
    path = tmp_path / "latin1.txt"
    path.write_bytes(b"caf\xe9 au lait\ncaf\xe9 noir\n")
    run_markov.main(["--corpus", str(path), "--count", "1", "--seed", "2"])
    assert capsys.readouterr().out.strip() in ("caf au lait", "caf noir")


def test_missing_corpus(tmp_path):
    with pytest.raises(SystemExit) as exc:
        run_markov.main(["--corpus", str(tmp_path / "*.txt")])
    assert "No corpus files found" in str(exc.value.code)


def test_source_is_required():
    with pytest.raises(SystemExit):
        run_markov.main(["--count", "1"])
