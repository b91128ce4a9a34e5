import os

from embedrank.config.config_loader import ConfigLoader

# Resolved once per process; services read from here
APP_SETTINGS = ConfigLoader.get_app_settings()

# Loggers created after this point pick up the configured folder, file and level
if APP_SETTINGS.logging.folder:
    os.environ.setdefault("EMBEDRANK_LOG_DIR", APP_SETTINGS.logging.folder)
os.environ.setdefault("EMBEDRANK_LOG_LEVEL", APP_SETTINGS.logging.level)
os.environ.setdefault("EMBEDRANK_LOG_FILE", APP_SETTINGS.logging.app_log_file)
