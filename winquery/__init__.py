"""
winquery - Query, order and select desktop windows from an enumeration snapshot.

Example:
    store = WindowStore(DesktopWindowProvider())
    store.refresh()
    first_two_chrome = store.run(
        FilterCriteria(title_contains="chrome"),
        SortCriteria(position=parse_position_sort("x1|y1")),
        parse_selection("1-2"),
    )
"""
__version__ = "0.2.0"

import sys

from .logger import get_logger, setup_logging
from .errors import ParseError, ParseErrorReason, ProviderError, WinQueryError
from .models import (
    Axis,
    FilterCriteria,
    Position,
    RawWindow,
    Selection,
    SortCriteria,
    SortDirection,
    WindowRecord,
)
from .filtering import filter_records, matches
from .sorting import parse_position_sort, parse_sort_criteria, parse_sort_direction, sort_records
from .selection import apply_selection, parse_selection
from .pipeline import Query, run
from .window import DesktopWindowProvider, EnumerationProvider, StaticWindowProvider
from .store import Snapshot, WindowStore, snapshot

_logger = get_logger(__name__)
_logger.debug(f"Initializing winquery v{__version__} on Python {sys.version.split()[0]} ({sys.platform})")

__all__ = [
    "__version__",
    "setup_logging", "get_logger",
    "WinQueryError", "ParseError", "ParseErrorReason", "ProviderError",
    "Axis", "FilterCriteria", "Position", "RawWindow", "Selection",
    "SortCriteria", "SortDirection", "WindowRecord",
    "matches", "filter_records",
    "sort_records", "parse_position_sort", "parse_sort_direction", "parse_sort_criteria",
    "parse_selection", "apply_selection",
    "run", "Query",
    "EnumerationProvider", "DesktopWindowProvider", "StaticWindowProvider",
    "Snapshot", "WindowStore", "snapshot",
]
