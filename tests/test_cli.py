"""End-to-end tests for the trichain command line."""

import pytest

import trichain as tc
from trichain import cli


TRAINING = """the cat sat on the mat
the dog sat on the rug
"""


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def training_file(tmp_path):
    """Write a small training corpus and return its path."""
    path = tmp_path / "train.txt"
    path.write_text(TRAINING, encoding="utf-8")
    return path


# Runs
# ---------------------------------------------------------------------------


def test_learn_print_and_save(training_file, tmp_path, capsys):
    """A run prints N sentences and writes the model files."""
    prefix = tmp_path / "db"
    code = cli.main(
        [str(training_file), "-n", "4", "--model", str(prefix), "--seed", "1"]
    )
    assert code == 0

    out = capsys.readouterr().out
    sentences = [line for line in out.splitlines() if line]
    assert len(sentences) == 4
    assert all(s.startswith("the ") for s in sentences)

    loaded = tc.from_pretrained(str(prefix) + ".model")
    assert len(loaded) > 0
    assert (tmp_path / "db.vocab").exists()


def test_second_run_accumulates_counts(training_file, tmp_path):
    """An existing model is loaded and updated rather than replaced."""
    prefix = str(tmp_path / "db")
    cli.main([str(training_file), "-n", "0", "--model", prefix])
    cli.main([str(training_file), "-n", "0", "--model", prefix])
    loaded = tc.from_pretrained(prefix + ".model")
    assert loaded.store.count(("sat", "on", "the")) == 4


def test_forget_prints_second_batch(training_file, tmp_path, capsys):
    """--forget removes tokens before printing a second batch."""
    prefix = str(tmp_path / "db")
    code = cli.main(
        [str(training_file), "-n", "3", "--model", prefix, "--forget", "cat"]
    )
    assert code == 0
    sentences = [line for line in capsys.readouterr().out.splitlines() if line]
    assert len(sentences) == 6
    assert all("cat" not in s for s in sentences[3:])

    loaded = tc.from_pretrained(prefix + ".model")
    assert all("cat" not in triplet for triplet in loaded.store)


def test_malformed_model_aborts(training_file, tmp_path):
    """A corrupt model stops the run and is left untouched."""
    model = tmp_path / "db.model"
    model.write_text("corrupt", encoding="utf-8")
    code = cli.main([str(training_file), "--model", str(tmp_path / "db")])
    assert code == cli.EXIT_SNAPSHOT
    assert model.read_text(encoding="utf-8") == "corrupt"


def test_fresh_replaces_malformed_model(training_file, tmp_path):
    """--fresh starts from an empty chain when the model is corrupt."""
    model = tmp_path / "db.model"
    model.write_text("corrupt", encoding="utf-8")
    code = cli.main(
        [str(training_file), "-n", "1", "--model", str(tmp_path / "db"), "--fresh"]
    )
    assert code == 0
    assert tc.from_pretrained(str(model)).store.count(("sat", "on", "the")) == 2


def test_nothing_learnable_reports_empty_model(tmp_path):
    """Training text with only short lines ends with the empty-model status."""
    path = tmp_path / "short.txt"
    path.write_text("hi\nhello there\n", encoding="utf-8")
    code = cli.main([str(path), "-n", "2", "--model", str(tmp_path / "db")])
    assert code == cli.EXIT_EMPTY_MODEL


def test_missing_training_file(tmp_path):
    """An unreadable training file is a usage error."""
    code = cli.main([str(tmp_path / "nope.txt"), "--model", str(tmp_path / "db")])
    assert code == cli.EXIT_USAGE
    assert not (tmp_path / "db.model").exists()
