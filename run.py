# run.py

import uvicorn
from uasniffer.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "uasniffer.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        workers=1,
    )
