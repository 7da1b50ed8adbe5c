"""
Financial Calculation Engine

Pure calculation modules for the growth and mortgage calculators.
Every function is a deterministic function of its inputs.
"""

from fincalc.calculations import amortization, compound, validation

__all__ = ["amortization", "compound", "validation"]
