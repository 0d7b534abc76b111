"""Start the chat relay backend, wait until it answers /health, then run the voice agent."""

import logging
import os
import subprocess
import sys
import time

import requests
from dotenv import load_dotenv

from gramasetu.services.voice_agent import main as voice_main

logger = logging.getLogger(__name__)


def wait_for_service(url, timeout=60, interval=2.0):
    """Wait until a service at `url` responds with status < 500 or until timeout."""
    start = time.time()
    while time.time() - start < timeout:
        try:
            r = requests.get(url, timeout=2)
            if r.status_code < 500:
                logger.info("Service at %s is ready.", url)
                return True
        except requests.exceptions.RequestException:
            pass
        time.sleep(interval)
    logger.error("Timeout waiting for %s", url)
    return False


def main() -> int:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
    base_url = os.getenv("VOICE_API_BASE_URL", f"http://localhost:{os.getenv('PORT', '4000')}").rstrip("/")

    logger.info("Starting chat relay backend...")
    backend = subprocess.Popen([sys.executable, "-m", "gramasetu.services.chat_api.app"])
    try:
        if not wait_for_service(f"{base_url}/health", timeout=int(os.getenv("STARTUP_TIMEOUT", "60"))):
            logger.error("Chat relay not ready, exiting.")
            return 1
        return voice_main.main()
    finally:
        backend.terminate()
        backend.wait(timeout=10)


if __name__ == "__main__":
    raise SystemExit(main())
