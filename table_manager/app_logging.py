import json
import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_LOGGER_INITIALIZED = False


class _JsonFormatter(logging.Formatter):
    def format(self, record):  # type: ignore
        data = {
            "level": record.levelname.lower(),
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            data["exc"] = self.formatException(record.exc_info)
        return json.dumps(data)


def init_logging(level: str = "INFO", json_logs: bool = False, force: bool = False) -> None:
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED and not force:
        return
    handler = logging.StreamHandler()
    if json_logs:
        handler.setFormatter(_JsonFormatter())
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=_FORMAT, handlers=[handler], force=True)
    _LOGGER_INITIALIZED = True


__all__ = ["init_logging"]
