from propwalk.context import _globals as gvar
from propwalk.context.config import Config
from propwalk.context.logger import Logger, log_func

cfg = Config

__all__ = ["Config", "Logger", "cfg", "gvar", "log_func"]
