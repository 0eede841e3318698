"""
API entry point

Run with:
    python -m tripsplit
"""

import uvicorn

from tripsplit.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "tripsplit.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
