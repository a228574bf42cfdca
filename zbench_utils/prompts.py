# SPDX-License-Identifier: Apache-2.0
"""Interactive fallbacks for flags the user left out."""

import sys
from typing import Optional, TextIO

from .validation import ValidationError


def _read_line(message: str, stdin: TextIO, stdout: TextIO) -> str:
    stdout.write(message)
    stdout.flush()
    line = stdin.readline()
    if not line:
        raise ValidationError("input error: end of input while waiting for an answer")
    return line.strip()


def prompt_string(message: str, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> str:
    """Ask until a non-blank answer is given."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    while True:
        text = _read_line(message, stdin, stdout)
        if text:
            return text


def prompt_int(message: str, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    """Ask until a positive integer is given."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    while True:
        text = _read_line(message, stdin, stdout)
        try:
            value = int(text)
        except ValueError:
            value = 0
        if value > 0:
            return value
        stdout.write("please enter a positive number\n")
