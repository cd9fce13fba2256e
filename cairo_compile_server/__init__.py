"""Remote compilation gateway for Cairo, Sierra, CASM and Scarb projects."""

__version__ = "0.1.0"
