"""mato-installer — resolve, run and verify a mato installation."""

__version__ = "0.1.0"
