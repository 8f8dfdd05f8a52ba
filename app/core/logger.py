from loguru import logger
import os

from app.core.config import settings

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def get_log_dir() -> str:
    """Каталог логов: абсолютный путь из настроек или путь относительно пакета app."""
    if os.path.isabs(settings.LOG_DIR):
        return settings.LOG_DIR
    return os.path.join(BASE_DIR, settings.LOG_DIR)


LOG_DIR = get_log_dir()
LOGS_LEVELS = ["DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {file}:{line} | {message}"

os.makedirs(LOG_DIR, exist_ok=True)

for level in LOGS_LEVELS:
    logger.add(
        os.path.join(LOG_DIR, f"{level.lower()}.log"),
        format=LOG_FORMAT,
        level=level,
        rotation="100 MB",
        retention="14 days",
        compression="zip",
        enqueue=True,
        filter=lambda record, lvl=level: record["level"].name == lvl
    )
