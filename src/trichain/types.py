"""
Core types for the triplet chain.
"""

from collections.abc import Sequence

type Token = str
type Triplet = tuple[Token, Token, Token]
type Prefix = tuple[Token] | tuple[Token, Token]
type TokenizedLines = Sequence[Sequence[Token]]
