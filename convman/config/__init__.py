from convman.config.config import Config as CONFIG
from convman.config.config import BotConfig, load_config
