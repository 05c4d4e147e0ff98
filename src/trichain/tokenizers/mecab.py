"""MeCab morphological analyzer wrapper."""

from dataclasses import dataclass
from typing import Final, override
import logging
import os
import shlex
import subprocess

from ..exceptions import TokenizationError
from ..types import Token
from .base import Tokenizer

DEFAULT_COMMAND: Final[str] = "mecab"
COMMAND_ENV: Final[str] = "TRICHAIN_MECAB_COMMAND"
OPTIONS_ENV: Final[str] = "TRICHAIN_MECAB_OPTIONS"
EOS: Final[str] = "EOS"

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Morpheme:
    """One line of MeCab's default (IPA dictionary) output."""

    surface: str
    pos: str
    pos_detail1: str
    pos_detail2: str
    pos_detail3: str
    conjugation_type: str
    conjugation_form: str
    base_form: str
    reading: str
    pronunciation: str = ""

    @classmethod
    def from_fields(cls, fields: list[str]) -> "Morpheme | None":
        """Build from ``[surface, feature...]``; ``None`` when features are missing."""
        # unknown words may carry only 7 features and no reading
        if len(fields) <= 8:
            return None
        return cls(*fields[:9], pronunciation=fields[9] if len(fields) > 9 else "")


class MeCabTokenizer(Tokenizer):
    """
    Tokenizer that runs the ``mecab`` command line tool.

    Text is piped to the process on stdin; no shell is involved. Generated
    sentences are joined without spaces.
    """

    TOKENIZER_TYPE = "mecab"

    def __init__(
        self,
        command: str | None = None,
        options: list[str] | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        :param command: Executable to run; falls back to ``$TRICHAIN_MECAB_COMMAND``, then ``mecab``.
        :param options: Extra arguments (e.g. ``["-d", "/path/to/dic"]``); falls back
            to ``$TRICHAIN_MECAB_OPTIONS`` split shell-style.
        :param timeout: Seconds to wait for the process, unbounded when ``None``.
        """
        super().__init__(separator="")
        self.command = command or os.environ.get(COMMAND_ENV) or DEFAULT_COMMAND
        if options is None:
            options = shlex.split(os.environ.get(OPTIONS_ENV, ""))
        self.options = list(options)
        self.timeout = timeout

    @override
    def tokenize(self, text: str) -> list[list[Token]]:
        """
        Split text into words with ``mecab -Owakati``.

        :raises TokenizationError: If MeCab cannot be started or exits with an error.
        """
        out = self._run(text.strip(), ["-Owakati"])
        return [line.split(" ") for line in out.split("\n")]

    def parse(self, text: str) -> list[Morpheme]:
        """
        Run a full morphological analysis.

        Lines without the complete feature set and ``EOS`` markers are skipped.

        :raises TokenizationError: If MeCab cannot be started or exits with an error.
        """
        morphemes = []
        for line in self._run(text.strip()).split("\n"):
            if not line or line == EOS:
                continue
            surface, _, features = line.partition("\t")
            morpheme = Morpheme.from_fields([surface, *features.split(",")])
            if morpheme is not None:
                morphemes.append(morpheme)
        return morphemes

    def _run(self, text: str, extra: list[str] | None = None) -> str:
        """Feed ``text`` to MeCab and return its stdout."""
        argv = [self.command, *self.options, *(extra or [])]
        log.debug(f"running {shlex.join(argv)}")
        try:
            res = subprocess.run(
                argv,
                input=text,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
                check=True,
            )
        except FileNotFoundError as e:
            raise TokenizationError("mecab executable not found", command=argv) from e
        except subprocess.CalledProcessError as e:
            raise TokenizationError(
                f"mecab failed: {(e.stderr or '').strip()}",
                command=argv,
                returncode=e.returncode,
            ) from e
        except (subprocess.TimeoutExpired, OSError) as e:
            raise TokenizationError(f"mecab could not run: {e}", command=argv) from e
        return res.stdout

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(command={self.command!r}, options={self.options!r})"
