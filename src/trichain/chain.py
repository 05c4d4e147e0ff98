"""
Second-order Markov chain over token triplets.
"""

import logging
import random
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Final

from ._decorators import measure_time
from ._sanitise import render_token
from .codec import deserialize, serialize
from .exceptions import EmptyModelError, SnapshotError
from .sampling import weighted_choice
from .store import BEGIN, END, SENTINELS, TripletStore
from .tokenizers.base import Tokenizer
from .tokenizers.regex import RegexTokenizer
from .types import Token, TokenizedLines

MODEL_SUFFIX: Final[str] = ".model"
VOCAB_SUFFIX: Final[str] = ".vocab"
DEFAULT_MAX_TOKENS: Final[int] = 1024

log = logging.getLogger(__name__)


def _clean(line: Iterable[Token]) -> list[Token]:
    """Drop blank tokens and tokens that would collide with the sentinels."""
    return [tok for tok in line if tok and not tok.isspace() and tok not in SENTINELS]


class TripletChain:
    """
    Trigram text generator.

    Learns how often each run of three tokens occurs, plus sentence start and
    end markers, and produces new sentences by walking those counts at random.
    All public operations are serialised by one re-entrant lock, so an
    instance can be shared between threads.
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        max_tokens: int | None = DEFAULT_MAX_TOKENS,
    ) -> None:
        """
        :param tokenizer: Splits training/forgetting text and joins output; a
            word-level :class:`RegexTokenizer` when ``None``.
        :param seed: Seed for a private random generator (ignored if ``rng`` is given).
        :param rng: Random generator to draw from.
        :param max_tokens: Cap on tokens per generated sentence, so walks over
            stores with cycles and no way out still end; ``None`` disables it.
        """
        if max_tokens is not None and max_tokens < 2:
            raise ValueError("max_tokens must be at least 2")
        self.tokenizer: Tokenizer = tokenizer or RegexTokenizer()
        self.rng: random.Random = rng or random.Random(seed)
        self.max_tokens = max_tokens
        self.store = TripletStore()
        self._lock = threading.RLock()

    # Learning
    # ---------------------------------------------------------------------------

    def learn(self, text: str) -> int:
        """
        Tokenize ``text`` (multi-line allowed) and learn every line.

        :returns: Number of lines that contributed triplets.
        :raises TokenizationError: If the tokenizer fails.
        """
        return self.learn_lines(self.tokenizer.tokenize(text))

    @measure_time
    def learn_lines(self, lines: TokenizedLines) -> int:
        """
        Fold pre-tokenized lines into the triplet counts.

        Each usable line adds its sliding 3-token windows plus
        ``(BEGIN, t0, t1)`` and ``(t[-2], t[-1], END)``. Lines with fewer than
        three tokens after dropping blanks are ignored entirely.

        :returns: Number of lines that contributed triplets.
        """
        learned = 0
        with self._lock:
            for line in lines:
                toks = _clean(line)
                if len(toks) < 3:
                    continue
                for i in range(len(toks) - 2):
                    self.store.increment(toks[i], toks[i + 1], toks[i + 2])
                self.store.increment(BEGIN, toks[0], toks[1])
                self.store.increment(toks[-2], toks[-1], END)
                learned += 1

        if learned == 0:
            log.warning("no line had 3 or more tokens, nothing learned")
        else:
            log.info(f"learned {learned} lines ({len(self.store)} distinct triplets)")
        return learned

    # Generation
    # ---------------------------------------------------------------------------

    def generate(self, n: int = 5) -> list[str]:
        """
        Generate ``n`` independent sentences.

        :raises ValueError: If ``n`` is negative.
        :raises EmptyModelError: If ``n > 0`` and no sentence start has been learned.
        """
        if n < 0:
            raise ValueError(f"sentence count must be non-negative, got {n}")
        return [self.generate_sentence() for _ in range(n)]

    def generate_sentence(self) -> str:
        """Generate one sentence joined with the tokenizer's separator."""
        return self.tokenizer.detokenize(self.generate_tokens())

    def generate_tokens(self) -> list[Token]:
        """
        Walk the chain from a sentence start until ``END``.

        A state with no recorded continuation ends the sentence there.

        :returns: Generated tokens without the trailing ``END``.
        :raises EmptyModelError: If no ``BEGIN`` triplet exists.
        """
        with self._lock:
            starts = self.store.candidates_by_prefix((BEGIN,))
            if not starts:
                raise EmptyModelError(
                    "chain has no sentence starts; learn some text first"
                )
            _, first, second = weighted_choice(starts, self.rng)
            toks = [first, second]

            while toks[-1] != END:
                if self.max_tokens is not None and len(toks) >= self.max_tokens:
                    log.debug(f"sentence cut at {self.max_tokens} tokens")
                    break
                candidates = self.store.candidates_by_prefix((toks[-2], toks[-1]))
                if not candidates:
                    # dead end
                    break
                toks.append(weighted_choice(candidates, self.rng)[2])

        if toks[-1] == END:
            toks.pop()
        return toks

    # Forgetting
    # ---------------------------------------------------------------------------

    def remove_triplets(self, text: str) -> int:
        """
        Forget every triplet containing any token found in ``text``.

        :returns: Number of triplets removed.
        :raises TokenizationError: If the tokenizer fails.
        """
        return self.forget_tokens(
            tok for line in self.tokenizer.tokenize(text) for tok in line
        )

    def forget_tokens(self, tokens: Iterable[Token]) -> int:
        """Forget every triplet containing any of ``tokens``; returns the number removed."""
        doomed = set(_clean(tokens))
        with self._lock:
            removed = self.store.remove_tokens(doomed)
        log.info(f"forgot {removed} triplets referencing {len(doomed)} tokens")
        return removed

    # Persistence
    # ---------------------------------------------------------------------------

    def export_snapshot(self) -> str:
        """Serialize the learned counts to text."""
        with self._lock:
            return serialize(self.store)

    def load_snapshot(self, blob: str) -> None:
        """
        Replace the learned counts with a serialized snapshot.

        The current state is kept when decoding fails.

        :raises SnapshotError: If ``blob`` is malformed.
        """
        store = deserialize(blob)
        with self._lock:
            self.store = store
        log.info(f"snapshot loaded: {len(store)} triplets")

    def save(self, file_prefix: str) -> None:
        """
        Save the chain to disk.

        Creates two files: a .model file with the snapshot and a .vocab file
        listing every triplet in readable form.

        :param file_prefix: Path prefix for output files.
        """
        log.info(f"saving chain to {file_prefix}")
        with self._lock:
            self._save_model(file_prefix)
            self._save_vocab(file_prefix)
        log.info("chain saved successfully")

    def load(self, model_filename: str) -> None:
        """
        Load the chain from a .model file, replacing the current counts.

        :param model_filename: Path to the .model file.
        :raises SnapshotError: If the file does not exist, the extension is not
            .model, or its content is malformed.
        """
        path = Path(model_filename)

        if not path.exists():
            raise SnapshotError("model filepath does not exist", model_path=str(path))

        if not path.suffix == MODEL_SUFFIX:
            raise SnapshotError("expected .model file", model_path=str(path))

        log.info(f"loading model from {path}")
        try:
            store = deserialize(path.read_text(encoding="utf-8"))
        except SnapshotError as e:
            raise SnapshotError(
                "malformed model file", model_path=str(path), line_no=e.line_no
            ) from e
        except UnicodeDecodeError as e:
            raise SnapshotError("model file is not utf-8 text", model_path=str(path)) from e

        with self._lock:
            self.store = store
        log.info(f"model loaded successfully: {len(store)} triplets")

    def _save_model(self, file_prefix: str) -> None:
        """Persist the snapshot to a .model file."""
        model_path = Path(file_prefix).with_suffix(MODEL_SUFFIX)
        # create directory if does not exist
        model_path.parent.mkdir(parents=True, exist_ok=True)

        log.debug(f"saving {len(self.store)} triplets to {model_path}")
        with model_path.open("w", encoding="utf-8", newline="\n") as f:
            f.write(serialize(self.store))

    def _save_vocab(self, file_prefix: str) -> None:
        """Persist human-readable triplets to a .vocab file."""
        vocab_path = Path(file_prefix).with_suffix(VOCAB_SUFFIX)
        vocab_path.parent.mkdir(parents=True, exist_ok=True)

        log.debug(f"saving vocab to {vocab_path}")
        entries = sorted(self.store.items(), key=lambda item: (-item[1], item[0]))
        with vocab_path.open("w", encoding="utf-8", newline="\n") as f:
            for triplet, n in entries:
                a, b, c = (render_token(tok) for tok in triplet)
                f.write(f"{n} [{a}] [{b}] [{c}]\n")

    def __len__(self) -> int:
        return len(self.store)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tokenizer={self.tokenizer!r}, triplets={len(self.store)})"
