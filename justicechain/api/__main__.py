"""Development server for justicechain API."""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "justicechain.api.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
