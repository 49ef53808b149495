"""On-chain deposit verification and crediting."""

__version__ = "1.0.0"
