"""
window.py - Window enumeration providers for winquery.

A provider turns the desktop into an ordered list of `RawWindow` rows. The
desktop provider uses PyWinCtl as the primary backend with PyGetWindow as a
fallback, and psutil to resolve process names and executable paths.
Backends are loaded on first use so that importing winquery never touches the
display server.
"""
from __future__ import annotations

import importlib
import sys
import threading
from collections.abc import Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

import psutil

from winquery.errors import ProviderError
from winquery.logger import get_logger
from winquery.models import Handle, RawWindow

logger = get_logger(__name__)

SUPPORTED_BACKENDS: tuple[str, ...] = ("pywinctl", "pygetwindow")


@runtime_checkable
class EnumerationProvider(Protocol):
    """Anything that can list the current windows in a stable order."""

    def enumerate(self) -> Sequence[RawWindow]: ...


class StaticWindowProvider:
    """Serves a fixed list of rows. Useful for tests, replays and offline use."""

    def __init__(self, rows: Iterable[RawWindow | Sequence[Any]] = ()):
        self._rows = tuple(row if isinstance(row, RawWindow) else RawWindow(*row) for row in rows)

    def enumerate(self) -> Sequence[RawWindow]:
        return self._rows


# --- Backend Loading ---
_backend_lock = threading.Lock()
_loaded_backends: dict[str, Any] = {}


def _import_backend(name: str) -> Any:
    return importlib.import_module(name)


def _load_backend(name: str) -> Any | None:
    """
    Imports a backend module; returns None if it cannot be used here.

    A missing package is cached as None. Other import failures are not
    cached, so the next call imports again.
    """
    if name not in SUPPORTED_BACKENDS:
        raise ValueError(f"Unknown window backend '{name}'. Supported: {SUPPORTED_BACKENDS}")

    with _backend_lock:
        if name in _loaded_backends:
            return _loaded_backends[name]
        try:
            module = _import_backend(name)
        except ImportError:
            logger.debug(f"Window backend '{name}' is not installed.")
            module = None
        except Exception as e:
            # PyWinCtl connects to the display server at import time on Linux
            # and raises Xlib errors there when no display is reachable
            logger.warning(f"Window backend '{name}' is installed but unusable: {e!s}")
            return None
        _loaded_backends[name] = module
        return module



def resolve_backend(preferred: str = "auto") -> tuple[str, Any]:
    """
    Picks the window backend to use.

    Args:
        preferred: "auto" (PyWinCtl, then PyGetWindow), or a backend name.

    Raises:
        ProviderError: If no usable backend is available.
    """
    candidates = SUPPORTED_BACKENDS if preferred == "auto" else (preferred,)
    for name in candidates:
        module = _load_backend(name)
        if module is not None:
            if name == "pygetwindow":
                logger.warning(
                    "Using 'pygetwindow' as fallback backend. Class names and process IDs "
                    "are unavailable on most platforms."
                )
            return name, module
    raise ProviderError(
        f"No window management backend ({' or '.join(candidates)}) could be loaded. "
        "Install one: 'pip install pywinctl' (recommended) or 'pip install pygetwindow'."
    )


# --- Attribute Helpers ---
def _read(obj: Any, *names: str, default: Any = None) -> Any:
    """Returns the first attribute in `names` that exists, calling it if callable."""
    for name in names:
        if not hasattr(obj, name):
            continue
        try:
            value = getattr(obj, name)
            return value() if callable(value) else value
        except Exception as e:
            logger.debug(f"Reading '{name}' from {type(obj).__name__} failed: {e!s}")
    return default


def _window_handle(w_impl: Any, fallback: int) -> Handle:
    handle = _read(w_impl, "getHandle", "_hWnd", "hWnd", "_winID", "id")
    return handle if isinstance(handle, (int, str)) else fallback


def process_info(pid: int) -> tuple[str, str]:
    """Returns (process_name, exe_path) for `pid`, empty strings when unknown."""
    if pid <= 0:
        return "", ""
    try:
        proc = psutil.Process(pid)
        name = proc.name() or ""
        try:
            exe = proc.exe() or ""
        except (psutil.AccessDenied, psutil.ZombieProcess):
            exe = ""
        return name, exe
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as e:
        logger.debug(f"Process info unavailable for PID {pid}: {e!s}")
        return "", ""


class DesktopWindowProvider:
    """
    Enumerates top-level desktop windows through PyWinCtl or PyGetWindow.

    Args:
        backend: "auto", "pywinctl" or "pygetwindow".
        include_untitled: Keep windows whose title is empty.
        visible_only: Skip windows the backend reports as not visible.
    """

    def __init__(self, backend: str = "auto", include_untitled: bool = False, visible_only: bool = True):
        self.backend = backend
        self.include_untitled = include_untitled
        self.visible_only = visible_only

    def _to_raw(self, w_impl: Any, position: int, backend_name: str) -> RawWindow | None:
        if self.visible_only and not bool(_read(w_impl, "isVisible", "visible", default=True)):
            return None

        title = str(_read(w_impl, "title", default="") or "").strip()
        if not title and not self.include_untitled:
            return None

        pid = _read(w_impl, "getPID", "pid", default=0)
        pid = int(pid) if isinstance(pid, int) and pid > 0 else 0
        process_name, process_file = process_info(pid)
        if not process_name and backend_name == "pywinctl":
            process_name = str(_read(w_impl, "getAppName", default="") or "")

        return RawWindow(
            handle=_window_handle(w_impl, position),
            title=title,
            class_name=str(_read(w_impl, "getClassName", "className", "class_name", default="") or ""),
            pid=pid,
            process_name=process_name,
            process_file_path=process_file,
            x=int(_read(w_impl, "left", default=0) or 0),
            y=int(_read(w_impl, "top", default=0) or 0),
            width=int(_read(w_impl, "width", default=0) or 0),
            height=int(_read(w_impl, "height", default=0) or 0),
        )

    def enumerate(self) -> Sequence[RawWindow]:
        """
        Lists the current windows in backend enumeration order.

        Raises:
            ProviderError: If no backend is usable or the backend's enumeration
                call fails. Individual windows that vanish mid-enumeration are
                skipped.
        """
        backend_name, module = resolve_backend(self.backend)
        logger.debug(f"Enumerating windows using backend '{backend_name}' on {sys.platform}...")

        try:
            raw_backend_windows = module.getAllWindows()
        except Exception as e:
            logger.error(f"Backend '{backend_name}' failed during getAllWindows(): {e!s}", exc_info=True)
            code = getattr(e, "winerror", None) or getattr(e, "errno", None)
            raise ProviderError(f"Cannot list windows using '{backend_name}': {e!s}", code=code) from e

        rows: list[RawWindow] = []
        for position, w_impl in enumerate(raw_backend_windows or (), start=1):
            try:
                row = self._to_raw(w_impl, position, backend_name)
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping window {getattr(w_impl, 'title', 'unknown')!r}: {e!s}")
                continue
            if row is not None:
                rows.append(row)

        logger.info(f"Enumerated {len(rows)} windows via '{backend_name}'.")
        return rows


def create_provider(provider_config: dict[str, Any] | None = None) -> DesktopWindowProvider:
    """Builds the desktop provider from the `provider` section of the config."""
    provider_config = provider_config or {}
    return DesktopWindowProvider(
        backend=provider_config.get("backend", "auto"),
        include_untitled=provider_config.get("include_untitled", False),
        visible_only=provider_config.get("visible_only", True),
    )
