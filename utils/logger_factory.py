import logging
import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class SafeLabelFormatter(logging.Formatter):
    def format(self, record):
        if not hasattr(record, 'label'):
            record.label = '-'
        return super().format(record)


class LabelLoggerAdapter(logging.LoggerAdapter):
    def __init__(self, logger, label):
        super().__init__(logger, {'label': label})

    def process(self, msg, kwargs):
        # The formatter prints module and label; the message stays as given
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def new_logger(label, module_name=None):
    """Return a logger adapter that prefixes every message with ``label``.

    ``module_name`` defaults to the caller's module so log lines can be traced
    back to the route or service that emitted them.
    """
    if module_name is None:
        import inspect
        frame = inspect.currentframe()
        try:
            module_name = frame.f_back.f_globals['__name__']
        finally:
            del frame
    logger = logging.getLogger(module_name)
    logger.propagate = False  # Prevent duplicate log messages

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(SafeLabelFormatter(
            fmt='%(asctime)s %(levelname)s %(module)s %(label)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    return LabelLoggerAdapter(logger, label)
