"""Unit tests for tokenizers, split patterns and the tokenizer factory."""

import subprocess

import pytest

import trichain as tc
from trichain.exceptions import PatternError, TokenizationError


WAKATI_OUT = "すもも も もも も もも の うち \n"

MECAB_OUT = (
    "すもも\t名詞,一般,*,*,*,*,すもも,スモモ,スモモ\n"
    "も\t助詞,係助詞,*,*,*,*,も,モ,モ\n"
    "ほげ\t名詞,一般,*,*,*,*,*\n"
    "EOS\n"
)


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_mecab(monkeypatch):
    """Patch subprocess.run to answer like MeCab and record the calls."""
    calls = []
    monkeypatch.delenv("TRICHAIN_MECAB_COMMAND", raising=False)
    monkeypatch.delenv("TRICHAIN_MECAB_OPTIONS", raising=False)

    def run(argv, **kwargs):
        calls.append((argv, kwargs))
        stdout = WAKATI_OUT if "-Owakati" in argv else MECAB_OUT
        return subprocess.CompletedProcess(argv, 0, stdout=stdout, stderr="")

    monkeypatch.setattr("trichain.tokenizers.mecab.subprocess.run", run)
    return calls


# Regex tokenizer
# ---------------------------------------------------------------------------


def test_words_pattern_splits_punctuation():
    """The default pattern keeps words whole and punctuation separate."""
    tok = tc.RegexTokenizer()
    assert tok.tokenize("Don't stop, it's 3.5 km!") == [
        ["Don't", "stop", ",", "it's", "3.5", "km", "!"]
    ]


def test_regex_tokenizer_one_list_per_line():
    """Each input line becomes its own token list."""
    tok = tc.RegexTokenizer(tc.TokenPattern.WHITESPACE)
    assert tok.tokenize("a b\n\nc d e\n") == [["a", "b"], [], ["c", "d", "e"]]


def test_script_runs_pattern_for_unspaced_text():
    """Script runs split Japanese at script boundaries and join without spaces."""
    tok = tc.get_tokenizer("regex", pattern="script-runs")
    assert tok.separator == ""
    assert tok.tokenize("今日はカレーを食べた。") == [
        ["今日", "は", "カレー", "を", "食", "べた", "。"]
    ]


def test_custom_pattern():
    """A custom pattern is used verbatim and joins with a space."""
    tok = tc.get_tokenizer("regex", custom_pattern=r"\d+")
    assert tok.separator == " "
    assert tok.tokenize("a1b22c333") == [["1", "22", "333"]]


def test_invalid_custom_pattern_raises():
    """An uncompilable pattern raises PatternError."""
    with pytest.raises(PatternError):
        tc.RegexTokenizer("(unclosed")


def test_capturing_group_pattern_raises():
    """Patterns with capturing groups are rejected."""
    with pytest.raises(PatternError):
        tc.RegexTokenizer(r"(\w)+")


def test_unknown_pattern_name_raises():
    """Unknown built-in pattern names raise PatternError."""
    with pytest.raises(PatternError):
        tc.get_tokenizer("regex", pattern="klingon")


def test_list_patterns_and_tokenizers():
    """Factory listings name every built-in option."""
    assert tc.list_patterns() == ["words", "whitespace", "script-runs", "chars"]
    assert tc.list_tokenizers() == ["regex", "mecab"]


def test_unknown_tokenizer_raises():
    """Unknown tokenizer names are rejected."""
    with pytest.raises(TokenizationError):
        tc.get_tokenizer("sentencepiece")


def test_detokenize_uses_separator():
    """detokenize joins with the tokenizer's separator."""
    assert tc.RegexTokenizer().detokenize(["a", "b"]) == "a b"
    assert tc.RegexTokenizer(tc.TokenPattern.CHARS).detokenize(["a", "b"]) == "ab"


# MeCab tokenizer
# ---------------------------------------------------------------------------


def test_mecab_tokenize_wakati(fake_mecab):
    """Wakati output becomes token lines; trailing blanks are left for the chain to skip."""
    tok = tc.MeCabTokenizer()
    lines = tok.tokenize("  すもももももももものうち  ")
    assert lines[0][:7] == ["すもも", "も", "もも", "も", "もも", "の", "うち"]

    argv, kwargs = fake_mecab[0]
    assert argv == ["mecab", "-Owakati"]
    assert kwargs["input"] == "すもももももももものうち"


def test_mecab_chain_learns_from_wakati(fake_mecab):
    """A chain backed by MeCab learns the analyzed words and joins without spaces."""
    chain = tc.TripletChain(tc.get_tokenizer("mecab"), seed=0)
    assert chain.learn("すもももももももものうち") == 1
    sentence = chain.generate(1)[0]
    assert sentence.startswith("すももも")
    assert sentence.endswith("のうち")
    assert " " not in sentence


def test_mecab_parse_features(fake_mecab):
    """Full analysis maps feature columns and skips EOS and short lines."""
    morphemes = tc.MeCabTokenizer().parse("すももも")
    assert [m.surface for m in morphemes] == ["すもも", "も"]
    first = morphemes[0]
    assert first.pos == "名詞"
    assert first.pos_detail1 == "一般"
    assert first.base_form == "すもも"
    assert first.reading == "スモモ"
    assert first.pronunciation == "スモモ"


def test_mecab_command_from_environment(monkeypatch, fake_mecab):
    """Command and options fall back to environment variables."""
    monkeypatch.setenv("TRICHAIN_MECAB_COMMAND", "/opt/mecab/bin/mecab")
    monkeypatch.setenv("TRICHAIN_MECAB_OPTIONS", "-d '/usr/lib/mecab dic'")
    tc.MeCabTokenizer().tokenize("テスト")
    argv, _ = fake_mecab[0]
    assert argv == ["/opt/mecab/bin/mecab", "-d", "/usr/lib/mecab dic", "-Owakati"]


def test_mecab_failure_raises(monkeypatch):
    """A non-zero exit surfaces as TokenizationError with the cause chained."""

    def run(argv, **kwargs):
        raise subprocess.CalledProcessError(1, argv, output="", stderr="no dictionary")

    monkeypatch.setattr("trichain.tokenizers.mecab.subprocess.run", run)
    with pytest.raises(TokenizationError) as exc_info:
        tc.MeCabTokenizer().tokenize("テスト")
    assert exc_info.value.returncode == 1
    assert isinstance(exc_info.value.__cause__, subprocess.CalledProcessError)


def test_mecab_missing_binary_raises(monkeypatch):
    """A missing executable surfaces as TokenizationError."""

    def run(argv, **kwargs):
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr("trichain.tokenizers.mecab.subprocess.run", run)
    chain = tc.TripletChain(tc.MeCabTokenizer(command="no-such-mecab"))
    with pytest.raises(TokenizationError):
        chain.learn("テスト")
    assert len(chain) == 0
