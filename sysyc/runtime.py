"""Input, output and timing functions available to compiled programs."""

from __future__ import annotations

import math
import re
import string
import struct
import sys
import time
from dataclasses import dataclass
from typing import IO

MAX_TIMERS = 1024
_SPACE = " \t\n\v\f\r"
_FLOAT_CHARS = frozenset("0123456789abcdefABCDEFxXpP.+-iInNtTyY")

_CONVERSION = re.compile(
    r"%(?P<flags>[-+ #0]*)(?P<width>\*|\d+)?(?:\.(?P<prec>\*|\d*))?"
    r"(?P<length>hh|h|ll|l|L|q|j|z|t)?(?P<conv>[diouxXeEfFgGaAcsp%])"
)


def _round_f32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def format_hex_float(value: float) -> str:
    """Hexadecimal floating-point text in the style of C's ``%a``."""
    value = float(value)
    if math.isnan(value):
        return "-nan" if math.copysign(1.0, value) < 0 else "nan"
    if math.isinf(value):
        return "-inf" if value < 0 else "inf"
    mantissa, exponent = value.hex().split("p")
    if "." in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(".")
    return f"{mantissa}p{exponent}"


def parse_hex_float(text: str) -> float:
    """Parse decimal or hexadecimal floating-point text."""
    stripped = text.strip()
    if stripped.lstrip("+-")[:2].lower() == "0x":
        return float.fromhex(stripped)
    return float(stripped)


@dataclass
class _Timer:
    start_line: int
    stop_line: int
    hours: int
    minutes: int
    seconds: int
    micros: int


class Runtime:
    """The runtime library over the given text streams."""

    def __init__(
        self,
        stdin: IO[str] | None = None,
        stdout: IO[str] | None = None,
        stderr: IO[str] | None = None,
    ) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self._pushback = ""
        self._timers: list[_Timer] = []
        self._started: tuple[int, int] | None = None

    def _read(self) -> str:
        if self._pushback:
            ch, self._pushback = self._pushback, ""
            return ch
        return self.stdin.read(1)

    def _unread(self, ch: str) -> None:
        if ch:
            self._pushback = ch

    def _skip_space(self) -> None:
        ch = self._read()
        while ch and ch in _SPACE:
            ch = self._read()
        self._unread(ch)

    def getint(self) -> int:
        self._skip_space()
        ch = self._read()
        if not ch:
            raise EOFError("no integer before end of input")
        text = ""
        if ch in "+-":
            text, ch = ch, self._read()
        while ch and ch in string.digits:
            text += ch
            ch = self._read()
        self._unread(ch)
        if not text.lstrip("+-"):
            raise ValueError("malformed integer in input")
        return int(text)

    def getch(self) -> int:
        ch = self._read()
        if not ch:
            raise EOFError("no character before end of input")
        code = ord(ch) & 0xFF
        return code - 256 if code >= 128 else code

    def getfloat(self) -> float:
        self._skip_space()
        chars: list[str] = []
        ch = self._read()
        while ch and ch in _FLOAT_CHARS:
            if ch in "+-" and chars:
                is_hex = "x" in "".join(chars).lower()
                if chars[-1] not in ("pP" if is_hex else "eEpP"):
                    break
            chars.append(ch)
            ch = self._read()
        self._unread(ch)
        if not chars:
            if not ch:
                raise EOFError("no number before end of input")
            raise ValueError("malformed number in input")
        return _round_f32(parse_hex_float("".join(chars)))

    def getarray(self, a: list) -> int:
        n = self.getint()
        a[:n] = [self.getint() for _ in range(n)]
        return n

    def getfarray(self, a: list) -> int:
        n = self.getint()
        a[:n] = [self.getfloat() for _ in range(n)]
        return n

    def putint(self, a: int) -> None:
        self.stdout.write(str(int(a)))

    def putch(self, a: int) -> None:
        self.stdout.write(chr(int(a) % 256))

    def putarray(self, n: int, a) -> None:
        self.stdout.write(f"{n}:" + "".join(f" {int(v)}" for v in list(a)[:n]) + "\n")

    def putfloat(self, a: float) -> None:
        self.stdout.write(format_hex_float(_round_f32(a)))

    def putfarray(self, n: int, a) -> None:
        items = "".join(f" {format_hex_float(_round_f32(v))}" for v in list(a)[:n])
        self.stdout.write(f"{n}:{items}\n")

    def putf(self, fmt: str, *args) -> None:
        """Formatted output following C ``printf`` conversions."""
        remaining = iter(args)

        def take():
            try:
                return next(remaining)
            except StopIteration:
                raise ValueError("not enough arguments for format") from None

        def convert(match: re.Match) -> str:
            conv = match["conv"]
            if conv == "%":
                return "%"
            flags = match["flags"]
            width = match["width"] or ""
            if width == "*":
                width = str(take())
            prec = match["prec"]
            if prec == "*":
                prec = str(take())
            precision = "" if prec is None else "." + prec
            arg = take()
            wide = match["length"] in ("l", "ll", "q", "j", "z", "t")
            mask = (1 << 64) - 1 if wide else (1 << 32) - 1
            if conv in "di":
                return f"%{flags}{width}{precision}d" % int(arg)
            if conv == "u":
                return f"%{flags}{width}{precision}d" % (int(arg) & mask)
            if conv in "oxX":
                return f"%{flags}{width}{precision}{conv}" % (int(arg) & mask)
            if conv in "eEfFgG":
                return f"%{flags}{width}{precision}{conv}" % float(arg)
            if conv == "c":
                return f"%{flags}{width}s" % chr(int(arg) % 256)
            if conv == "s":
                return f"%{flags}{width}{precision}s" % arg
            if conv == "p":
                return f"%{flags}{width}s" % hex(int(arg))
            text = format_hex_float(float(arg))
            if conv == "A":
                text = text.upper()
            size = int(width) if width else 0
            return text.ljust(size) if "-" in flags else text.rjust(size)

        self.stdout.write(_CONVERSION.sub(convert, fmt))

    def starttime(self, lineno: int) -> None:
        self._started = (lineno, time.monotonic_ns())

    def stoptime(self, lineno: int) -> None:
        end = time.monotonic_ns()
        if self._started is None:
            raise RuntimeError("stoptime called without starttime")
        if len(self._timers) + 1 >= MAX_TIMERS:
            raise RuntimeError("too many timers")
        start_line, start = self._started
        micros = (end - start) // 1000
        seconds, micros = divmod(micros, 1_000_000)
        minutes, seconds = divmod(seconds, 60)
        hours, minutes = divmod(minutes, 60)
        self._timers.append(_Timer(start_line, lineno, hours, minutes, seconds, micros))

    def report(self) -> str:
        """Write every timer and their total to stderr, and return that text."""
        lines = []
        hours = minutes = seconds = micros = 0
        for t in self._timers:
            lines.append(
                f"Timer@{t.start_line:04d}-{t.stop_line:04d}: "
                f"{t.hours}H-{t.minutes}M-{t.seconds}S-{t.micros}us\n"
            )
            micros = (micros + t.micros) % 1_000_000
            seconds = (seconds + t.seconds) % 60
            minutes = (minutes + t.minutes) % 60
            hours += t.hours
        lines.append(f"TOTAL: {hours}H-{minutes}M-{seconds}S-{micros}us\n")
        text = "".join(lines)
        self.stderr.write(text)
        return text