# server.py

import logging
import os
from dotenv import load_dotenv
import uvicorn

# Load environment variables from .env before the app reads them
load_dotenv()

# Module level so the reload worker, which re-imports "server:app", gets handlers too
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

from app import app  # noqa: E402

# Get the PORT from environment variables or default to 5001
PORT = int(os.environ.get("PORT", 5001))

if __name__ == "__main__":
    print(f"Server running on http://localhost:{PORT}")
    uvicorn.run(
        "server:app",
        host="0.0.0.0",
        port=PORT,
        reload=os.environ.get("ENVIRONMENT") != "production",
    )
