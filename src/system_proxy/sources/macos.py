"""
macOS settings source backed by `scutil --proxy`.

scutil prints the same dictionary CFNetworkCopySystemProxySettings returns:

    <dictionary> {
      ExceptionsList : <array> {
        0 : *.local
        1 : 169.254/16
      }
      HTTPEnable : 1
      HTTPPort : 8080
      HTTPProxy : proxy.example.com
    }
"""
import logging
import re
import subprocess
from typing import Any, Callable, Dict, Iterator, List, Optional

from .base import BaseSettingsSource
from ..types import SettingsBag, SettingsUnavailableError

logger = logging.getLogger("system_proxy.sources.macos")

DEFAULT_SCUTIL_PATH = "/usr/sbin/scutil"
DEFAULT_SCUTIL_TIMEOUT = 2.0

_DICT_OPEN = "<dictionary> {"
_ARRAY_OPEN = "<array> {"
_INT_RE = re.compile(r"^-?\d+$")


def _scalar(text: str) -> Any:
    if _INT_RE.match(text):
        return int(text)
    return text


def _parse_entries(lines: Iterator[str], numeric: bool = True) -> List[tuple]:
    """
    Consume "key : value" lines up to the closing brace.

    Array items (host patterns) are kept as strings when numeric is False.
    """
    entries: List[tuple] = []
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        if line == "}":
            return entries
        key, sep, value = line.partition(" :")
        if not sep:
            raise ValueError(f"unexpected scutil line: {line!r}")
        key = key.strip()
        value = value.strip()
        if value == _DICT_OPEN:
            entries.append((key, dict(_parse_entries(lines))))
        elif value == _ARRAY_OPEN:
            entries.append((key, [item for _, item in _parse_entries(lines, numeric=False)]))
        else:
            entries.append((key, _scalar(value) if numeric else value))
    raise ValueError("unterminated scutil block")


def parse_scutil_output(text: str) -> Dict[str, Any]:
    """
    Parse `scutil --proxy` output into a nested dict.

    Integer literals in dictionaries become int. Arrays become lists of
    strings (in index order). Everything else stays a string.

    Raises:
        ValueError: If the text is not a scutil dictionary.
    """
    lines = iter(text.splitlines())
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        if line != _DICT_OPEN:
            raise ValueError(f"expected {_DICT_OPEN!r}, got {line!r}")
        return dict(_parse_entries(lines))
    raise ValueError("empty scutil output")


class ScutilSettingsSource(BaseSettingsSource):
    """
    Reads the macOS system proxy configuration through scutil.

    Example:
        >>> source = ScutilSettingsSource()
        >>> bag = source.read()
        >>> bag.get("HTTPEnable")
        1
    """

    def __init__(
        self,
        scutil_path: str = DEFAULT_SCUTIL_PATH,
        timeout: float = DEFAULT_SCUTIL_TIMEOUT,
        runner: Optional[Callable[..., subprocess.CompletedProcess]] = None,
    ) -> None:
        self._scutil_path = scutil_path
        self._timeout = timeout
        self._runner = runner or subprocess.run

    @property
    def name(self) -> str:
        return "scutil"

    def read(self) -> Optional[SettingsBag]:
        command = [self._scutil_path, "--proxy"]
        logger.debug(f"read: running {command} timeout={self._timeout}s")
        try:
            result = self._runner(
                command,
                capture_output=True,
                text=True,
                check=False,
                timeout=self._timeout,
            )
        except FileNotFoundError as e:
            raise SettingsUnavailableError(f"scutil not found at {self._scutil_path}") from e
        except subprocess.TimeoutExpired as e:
            raise SettingsUnavailableError(f"scutil timed out after {self._timeout}s") from e
        except (OSError, subprocess.SubprocessError) as e:
            raise SettingsUnavailableError(f"scutil failed: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise SettingsUnavailableError(
                f"scutil exited with status {result.returncode}: {stderr}"
            )

        stdout = result.stdout or ""
        if not stdout.strip():
            return None

        try:
            bag = parse_scutil_output(stdout)
        except ValueError as e:
            raise SettingsUnavailableError(f"unparseable scutil output: {e}") from e

        logger.debug(f"read: parsed keys={sorted(bag)}")
        return bag
