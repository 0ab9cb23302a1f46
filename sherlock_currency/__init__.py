"""sherlock-currency: currency conversion for the Sherlock launcher."""

__version__ = "0.1.0"
