from json_secure_logger.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
