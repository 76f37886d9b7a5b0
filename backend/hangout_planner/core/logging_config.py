import logging
import re

import structlog

from hangout_planner.core.settings import Settings

_KEY_PARAM = re.compile(r'([?&]key=)[^&\s]+')
_GOOGLE_KEY = re.compile(r'(AIza[0-9A-Za-z\-_]{35})')


def redact_api_keys(logger, method_name, event_dict):
    """Scrub Google API keys from every string value in the event dict"""

    def scrub(v):
        if isinstance(v, str):
            v = _KEY_PARAM.sub(r'\1REDACTED', v)
            return _GOOGLE_KEY.sub('REDACTED', v)
        if isinstance(v, list):
            return [scrub(x) for x in v]
        if isinstance(v, dict):
            return {k: scrub(vv) for k, vv in v.items()}
        return v

    for k, v in list(event_dict.items()):
        event_dict[k] = scrub(v)
    return event_dict


def configure_logging(settings: Settings) -> None:
    """
    JSON logs through structlog, written by the stdlib root logger to stderr
    and, when LOG_FILE is set, to that file. Safe to call more than once.
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handlers = [logging.StreamHandler()]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE))
    logging.basicConfig(level=level, format='%(message)s', handlers=handlers, force=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            # keys must be gone before anything is rendered
            redact_api_keys,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
