"""Exceptions raised by the simulator before or around a run.

The core itself never raises once it has a valid configuration; these
cover the edges (bad parameters, bad trace text).
"""


class ConfigurationError(ValueError):
    """Cache parameters that cannot describe a real cache."""


class TraceFormatError(ValueError):
    """A trace line that does not follow the `R: 0x...` / `W: 0x...` grammar."""

    def __init__(self, line_number: int, text: str):
        super().__init__(f"malformed trace line {line_number}: {text!r}")
        self.line_number = line_number
        self.text = text
