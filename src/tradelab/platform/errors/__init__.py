from .tradelab_error import ERROR_CODES, ErrorCode, TradelabError

__all__ = ["ERROR_CODES", "ErrorCode", "TradelabError"]
