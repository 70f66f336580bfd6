"""Main entry point: Discord bot with the FastAPI admin surface."""

import logging
import os
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

# Configure logging BEFORE importing any modules that use logger
log_level = os.getenv('LOG_LEVEL', 'INFO')
logging.basicConfig(
    level=getattr(logging, log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Import after logging is configured
from mentat.constants import CONFIG_FILE, DISCORD_TOKEN, PLUGINS_DIR
from mentat.core.framework import BotFramework
from mentat.core.gateway import create_bot
from mentat.services.config_service import ConfigService
from mentat.web import create_app

config_service = ConfigService(CONFIG_FILE)
framework = BotFramework(
    client=create_bot(config_service.prefix),
    config_service=config_service,
    plugins_dir=PLUGINS_DIR,
    token=DISCORD_TOKEN,
)
app = create_app(framework)


if __name__ == "__main__":
    import uvicorn
    port = int(config_service.get("port") or 3000)
    logger.info(f"Web interface available at http://localhost:{port}")
    uvicorn.run(app, host="0.0.0.0", port=port)
