import logging
import re
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# ANSI escape codes for levels
COLORS = {
    'DEBUG': '\033[36m',    # Cyan
    'INFO': '\033[32m',     # Green
    'WARNING': '\033[33m',  # Yellow
    'ERROR': '\033[31m',    # Red
    'CRITICAL': '\033[35m', # Magenta
    'RESET': '\033[0m'
}

# Colors for message tags
TAG_COLORS = {
    'square': '\033[36m',   # Context: [Localization], [TableCache]
    'quoted': '\033[33m',   # Names: 'German', 'greet_key'
    'curly': '\033[32m',    # Placeholder tokens: {name}, {count}
    'RESET': '\033[0m'
}


class TimezoneFormatter(logging.Formatter):
    """Formatter that renders asctime in a configured timezone"""

    def __init__(self, fmt, datefmt=None, style='%', timezone='UTC'):
        super().__init__(fmt, datefmt, style)
        try:
            self._timezone = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError):
            # Unknown timezone name
            self._timezone = ZoneInfo('UTC')

    def formatTime(self, record, datefmt=None):
        ct = datetime.fromtimestamp(record.created, tz=self._timezone)
        if datefmt:
            return ct.strftime(datefmt)
        s = ct.strftime(self.default_time_format)
        if self.default_msec_format:
            s = self.default_msec_format % (s, record.msecs)
        return s


class ColoredFormatter(TimezoneFormatter):
    """Console formatter with level colors and optional tag highlighting"""

    def __init__(self, fmt, datefmt=None, style='%', use_colors=True, smart_format=False, timezone='UTC'):
        super().__init__(fmt, datefmt, style, timezone=timezone)
        self.use_colors = use_colors
        self.smart_format = smart_format

        if self.smart_format:
            self._square_pattern = re.compile(r'(\[[^\]]+\])')
            self._quoted_pattern = re.compile(r"('[^']*')")
            self._curly_pattern = re.compile(r'(\{[^{}]+\})')

    def _paint(self, pattern, color_key, message):
        color = TAG_COLORS[color_key]
        return pattern.sub(lambda m: f'{color}{m.group(1)}{TAG_COLORS["RESET"]}', message)

    def format(self, record):
        message = super().format(record)

        if not self.use_colors:
            return message

        # Tags first, then the level name
        if self.smart_format:
            if '[' in message:
                message = self._paint(self._square_pattern, 'square', message)
            if "'" in message:
                message = self._paint(self._quoted_pattern, 'quoted', message)
            if '{' in message:
                message = self._paint(self._curly_pattern, 'curly', message)

        levelname = record.levelname
        if levelname in COLORS:
            # Only the first occurrence, which is the one logging inserted
            message = message.replace(levelname, f"{COLORS[levelname]}{levelname}{COLORS['RESET']}", 1)

        return message
