"""
Entry point for the Entity API server
"""

import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from entity_api.app import app
from entity_api.config.settings import PORT

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Entity API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
