"""Archiver configuration.

Settings come from a `.properties` file (default `config.properties` in the
working directory):

    ROOT_PATH=/srv/share
    TEMP_PATH=/srv/archive
    DELETION_FREQUENCY_DAYS=30
    FOLDER_NAMES=Scans,Exports,Drafts

The result is a frozen `Config` that is passed explicitly to the scheduler
and the sweep.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from string import hexdigits

DEFAULT_CONFIG_PATH = Path("config.properties")

REQUIRED_KEYS = ("ROOT_PATH", "TEMP_PATH", "DELETION_FREQUENCY_DAYS", "FOLDER_NAMES")
COMMENT_PREFIXES = ("#", "!")
KEY_TERMINATORS = "=:"
WHITESPACE = " \t\f"
ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


class ConfigError(ValueError):
    """Raised when the configuration is missing or malformed."""


@dataclass(frozen=True)
class Config:
    root_path: Path
    temp_path: Path
    frequency_days: int
    folder_names: tuple[str, ...]

    def folder_paths(self) -> list[Path]:
        return [self.root_path / name for name in self.folder_names]


def _logical_lines(text: str):
    """Yield property lines with comments dropped and `\\` continuations joined."""
    pending = None
    for raw_line in text.splitlines():
        line = raw_line.lstrip(WHITESPACE)
        if pending is None and (not line or line.startswith(COMMENT_PREFIXES)):
            continue
        trailing_backslashes = len(line) - len(line.rstrip("\\"))
        if trailing_backslashes % 2:
            pending = (pending or "") + line[:-1]
            continue
        yield (pending or "") + line
        pending = None
    if pending is not None:
        yield pending


def _unescape(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        i += 1
        if ch != "\\":
            out.append(ch)
            continue
        if i == len(text):
            break
        ch = text[i]
        i += 1
        if ch == "u":
            digits = text[i:i + 4]
            if len(digits) < 4 or not all(c in hexdigits for c in digits):
                raise ConfigError(f"Malformed \\uxxxx escape: \\u{digits}")
            out.append(chr(int(digits, 16)))
            i += 4
            continue
        out.append(ESCAPES.get(ch, ch))
    return "".join(out)


def _split_entry(line: str) -> tuple[str, str]:
    end = 0
    while end < len(line):
        ch = line[end]
        if ch == "\\":
            end += 2
            continue
        if ch in KEY_TERMINATORS or ch in WHITESPACE:
            break
        end += 1
    rest = line[end:].lstrip(WHITESPACE)
    if rest[:1] and rest[0] in KEY_TERMINATORS:
        rest = rest[1:].lstrip(WHITESPACE)
    return line[:end], rest.rstrip(WHITESPACE)


def parse_properties(text: str) -> dict[str, str]:
    """Parse `.properties` text the way `java.util.Properties.load` does.

    Keys end at the first unescaped `=`, `:` or whitespace. Backslash escapes
    (`\\\\`, `\\t`, `\\uXXXX`, ...) are decoded, and a line ending in an odd
    number of backslashes continues on the next line. Trailing whitespace
    is trimmed from values.
    """
    props: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        props[_unescape(key)] = _unescape(value)
    return props


def parse_folder_names(value: str) -> tuple[str, ...]:
    return tuple(name.strip() for name in value.split(",") if name.strip())


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


def build_config(props: dict[str, str]) -> Config:
    missing = [key for key in REQUIRED_KEYS if not props.get(key)]
    if missing:
        raise ConfigError(f"Missing configuration keys: {', '.join(missing)}")

    raw_days = props["DELETION_FREQUENCY_DAYS"]
    try:
        frequency_days = int(raw_days)
    except ValueError:
        raise ConfigError(f"DELETION_FREQUENCY_DAYS is not an integer: {raw_days!r}") from None
    if frequency_days <= 0:
        raise ConfigError(f"DELETION_FREQUENCY_DAYS must be positive, got {frequency_days}")

    folder_names = parse_folder_names(props["FOLDER_NAMES"])
    if not folder_names:
        raise ConfigError("FOLDER_NAMES does not name any folder")

    config = Config(
        root_path=Path(props["ROOT_PATH"]).expanduser(),
        temp_path=Path(props["TEMP_PATH"]).expanduser(),
        frequency_days=frequency_days,
        folder_names=folder_names,
    )

    archive_root = config.temp_path.resolve()
    for folder in config.folder_paths():
        if _is_within(archive_root, folder.resolve()):
            raise ConfigError(
                f"TEMP_PATH {config.temp_path} lies inside swept folder {folder}"
            )
    return config


def load_config(path: Path | str = DEFAULT_CONFIG_PATH) -> Config:
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {config_path}") from None
    except OSError as exc:
        raise ConfigError(f"Error reading configuration file {config_path}: {exc}") from exc
    return build_config(parse_properties(text))
