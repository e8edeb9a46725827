from json_secure_logger.services.emitter import RequestLogger, get_request_logger

__all__ = ["RequestLogger", "get_request_logger"]
