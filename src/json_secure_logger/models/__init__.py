from json_secure_logger.models.context import InvocationContext

__all__ = ["InvocationContext"]
