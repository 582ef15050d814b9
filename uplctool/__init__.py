"""Parse, pretty-print, convert and flat-encode Untyped Plutus Core programs."""

__version__ = "0.1.0"