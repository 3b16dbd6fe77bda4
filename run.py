import sys
import logging
import uvicorn
from volumechat.config.settings import HOST, PORT, LOG_LEVEL

# Set up logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

def run_fastapi():
    """Run the FastAPI server"""
    logger.info(f"Starting FastAPI server on {HOST}:{PORT}...")
    uvicorn.run("volumechat.backend:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())

if __name__ == "__main__":
    try:
        run_fastapi()
    except KeyboardInterrupt:
        logger.info("\nShutting down...")
    except Exception as e:
        logger.error(f"Error running FastAPI server: {e}")
        sys.exit(1)
