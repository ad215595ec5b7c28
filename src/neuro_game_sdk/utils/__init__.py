from .logsink import LogLevel, LogSink, default_sink, logging_sink

__all__ = ["LogLevel", "LogSink", "default_sink", "logging_sink"]
