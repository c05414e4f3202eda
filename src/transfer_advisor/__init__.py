"""Transfer recommendations for fixed train -> bus commutes."""

__version__ = "0.1.0"
