#!/usr/bin/env python
"""
Example 01: Recovering from malformed rows

A low-level parser raises ``malformed_row`` for every line it cannot read.
Callers further up decide what to do, without the parser knowing about them:
the inner handler fixes what it can and re-raises the rest, the outer handler
substitutes a fallback.

Run:
    python examples/01_malformed_rows.py
"""

import logging

from dyncond import Condition

malformed_row: Condition[str, int] = Condition("malformed_row")


def parse_rows(lines):
    """Parse integers; ask the active handler what to use for bad lines."""
    return [int(line) if line.strip().isdigit() else malformed_row.raise_(line) for line in lines]


def strip_units(line: str) -> int:
    digits = line.rstrip("kg ").strip()
    if digits.isdigit():
        return int(digits)
    # Not ours to fix; let an enclosing handler decide.
    return malformed_row.raise_(line)


def load(lines):
    return malformed_row.trap(strip_units).run(parse_rows, lines)


def main():
    lines = ["10", "12kg", "n/a", "7"]

    with malformed_row.trap(lambda line: -1):
        print("with fallback:", load(lines))

    # Without an enclosing handler, raise_default supplies the answer instead.
    print("with default:", malformed_row.raise_default("n/a", lambda: 0))


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    main()
