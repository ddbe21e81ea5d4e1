"""Tax Calc - progressive personal income tax calculator."""

__version__ = "0.1.0"
