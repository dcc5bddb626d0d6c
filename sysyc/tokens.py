"""Token kinds produced by the scanner and consumed by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class TokenKind(IntEnum):
    EMPTY = -2
    EOF = 0
    ERROR = 256
    UNDEF = 257
    INT = 258
    FLOAT = 259
    ID = 260
    GTE = 261
    LTE = 262
    GT = 263
    LT = 264
    EQ = 265
    NEQ = 266
    INTTYPE = 267
    FLOATTYPE = 268
    VOID = 269
    CONST = 270
    RETURN = 271
    IF = 272
    ELSE = 273
    WHILE = 274
    BREAK = 275
    CONTINUE = 276
    LP = 277
    RP = 278
    LB = 279
    RB = 280
    LC = 281
    RC = 282
    COMMA = 283
    SEMICOLON = 284
    NOT = 285
    ASSIGN = 286
    MINUS = 287
    ADD = 288
    MUL = 289
    DIV = 290
    MOD = 291
    AND = 292
    OR = 293
    LOWER_THEN_ELSE = 294


@dataclass(frozen=True)
class Token:
    """A scanned token: its kind, source text, semantic value and line."""

    kind: TokenKind
    text: str = ""
    value: int | float | str | None = None
    line: int = 1