"""
Run the API server: python -m fincalc
"""

import uvicorn

from fincalc.config import get_settings

settings = get_settings()

if __name__ == "__main__":
    uvicorn.run(
        "fincalc.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
