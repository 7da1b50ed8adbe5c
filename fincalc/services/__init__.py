"""
Services for the calculator front end: exchange rates and session state.
"""

from fincalc.services.fx import FXService, FXServiceError, get_fx_service
from fincalc.services.session import CalculatorSession

__all__ = ["FXService", "FXServiceError", "get_fx_service", "CalculatorSession"]
