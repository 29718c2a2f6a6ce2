"""
Pytest configuration and fixtures for winquery tests.

All fixtures are built from static rows, so no display server is needed.
"""

import pytest

from winquery.models import RawWindow
from winquery.store import Snapshot, WindowStore, snapshot
from winquery.window import StaticWindowProvider


@pytest.fixture
def raw_rows() -> list[RawWindow]:
    """Five windows in provider order, with deliberate ties on pid and x."""
    return [
        RawWindow(0x1001, "Inbox - Mozilla Thunderbird", "MozillaWindowClass", 300,
                  "thunderbird.exe", r"C:\Program Files\Thunderbird\thunderbird.exe", 100, 50),
        RawWindow(0x1002, "GitHub - Google Chrome", "Chrome_WidgetWin_1", 200,
                  "chrome.exe", r"C:\Program Files\Google\Chrome\chrome.exe", 0, 0, 1280, 720),
        RawWindow(0x1003, "notes.txt - Notepad", "Notepad", 400,
                  "notepad.exe", r"C:\Windows\System32\notepad.exe", 100, 10),
        RawWindow(0x1004, "Docs - Google Chrome", "Chrome_WidgetWin_1", 200,
                  "chrome.exe", r"C:\Program Files\Google\Chrome\chrome.exe", 640, 0),
        RawWindow(0x1005, "", "Shell_TrayWnd", 100,
                  "explorer.exe", r"C:\Windows\explorer.exe", 0, 1040),
    ]


@pytest.fixture
def windows(raw_rows) -> Snapshot:
    return snapshot(raw_rows)


@pytest.fixture
def provider(raw_rows) -> StaticWindowProvider:
    return StaticWindowProvider(raw_rows)


@pytest.fixture
def store(provider) -> WindowStore:
    window_store = WindowStore(provider)
    window_store.refresh()
    return window_store


def titles(records) -> list[str]:
    return [r.title for r in records]


def indices(records) -> list[int]:
    return [r.index for r in records]
