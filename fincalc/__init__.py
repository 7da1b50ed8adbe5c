"""
Personal finance calculators: compound growth projections and mortgage
amortization, with exchange-rate lookups for currency conversion.
"""

__version__ = "0.1.0"
