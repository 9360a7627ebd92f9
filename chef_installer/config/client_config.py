# Path and File Name : /opt/chef-installer/chef_installer/config/client_config.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Loads and saves Chef client.rb key/value configuration idempotently - preserves unrecognized lines and never duplicates keys

"""
Client Config: Round-trip engine for Chef client.rb files.

Loading applies defaults for the known fields, then overlays every
"name value" line found on disk (last occurrence wins). Malformed lines
are warned about but never abort the load.

Saving merges rendered "name    value" lines into the existing file
(APPEND) or into an empty buffer (OVERWRITE). Lines the engine does not
own (comments, Ruby expressions, custom settings) survive an APPEND save
untouched.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


DEFAULT_FIELDS = {
    'log_level': '',
    'log_location': '',
    'cache_path': '',
    'client_key': '',
    'node_name': '',
    'chef_server_url': '',
    'encrypted_data_bag_secret': '',
    'validation_client_name': '',
    'validation_key': '',
    'interval': '',
    'json_attribs': '',
    'ssl_verify_mode': '',
    'environment': '_default',
}

KNOWN_FIELDS = tuple(DEFAULT_FIELDS)

FIELD_NAME_PATTERN = re.compile(r'^[a-zA-Z0-9_]+$')
RECOGNIZED_LINE_PATTERN = re.compile(
    r'''^[a-zA-Z0-9_]+[ \t]+(?:'[^']*'|"[^"]*"|[0-9.]+|:\S+|=.*)[ \t]*$'''
)
LEADING_KEY_PATTERN = re.compile(r'^[ \t]*([a-zA-Z0-9_]+)[ \t]')
UNQUOTED_VALUE_PATTERN = re.compile(r'^[0-9.]*$')
TOKEN_SPLIT_PATTERN = re.compile(r'[ \t]+')

FIELD_SEPARATOR = '    '

# Undecodable bytes round-trip unchanged through surrogateescape
FILE_ENCODING = 'utf-8'
FILE_ERRORS = 'surrogateescape'


class SaveMode(Enum):
    """How save_config treats an existing destination file."""
    APPEND = 'append'
    OVERWRITE = 'overwrite'


class ConfigExistsError(FileExistsError):
    """Raised when saving onto an existing file without choosing a save mode."""
    pass


@dataclass
class ConfigDocument:
    """
    In-memory client.rb document.

    fields holds the known defaults plus anything loaded from disk.
    additional_fields holds caller-supplied extras and wins over fields
    when the document is saved.
    """
    fields: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_FIELDS))
    additional_fields: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        if name in self.additional_fields:
            return self.additional_fields[name]
        return self.fields.get(name, default)

    def set(self, name: str, value: str) -> None:
        """Known fields go to fields, everything else to additional_fields."""
        if not FIELD_NAME_PATTERN.match(name):
            raise ValueError(f"Invalid config field name: {name!r}")
        if name in DEFAULT_FIELDS:
            self.fields[name] = value
        else:
            self.additional_fields[name] = value

    def merged(self) -> Dict[str, str]:
        merged = dict(self.fields)
        merged.update(self.additional_fields)
        return merged


def parse_line(line: str) -> Optional[Tuple[str, str]]:
    """
    Tokenize one client.rb line into (name, value).

    Returns None for blank lines, comments and lines whose first token
    is not a field name.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith('#'):
        return None

    if not RECOGNIZED_LINE_PATTERN.match(stripped):
        logger.warning(f"Unrecognized config line, parsing best-effort: {stripped}")

    tokens = TOKEN_SPLIT_PATTERN.split(stripped)
    name = tokens[0]
    if not FIELD_NAME_PATTERN.match(name):
        return None

    value = ' '.join(tokens[1:])
    if value[:1] in ('"', "'"):
        value = value[1:]
    if value[-1:] in ('"', "'"):
        value = value[:-1]
    return name, value


def _read_lines(config_path: Path) -> List[str]:
    """Physical lines split on \\n only; a final newline does not add an empty line."""
    with open(config_path, 'r', encoding=FILE_ENCODING, errors=FILE_ERRORS, newline='') as f:
        lines = f.read().split('\n')
    if lines[-1] == '':
        lines.pop()
    return lines


def load_config(path: Optional[Union[str, Path]] = None) -> ConfigDocument:
    """
    Load a client.rb file into a ConfigDocument.

    Args:
        path: File to read. None, "" or a missing file yields defaults only.

    Returns:
        ConfigDocument with defaults overlaid by the file contents

    Raises:
        OSError: If the file exists but cannot be read
    """
    document = ConfigDocument()
    if not path:
        return document

    config_path = Path(path)
    if not config_path.exists():
        logger.debug(f"Config file {config_path} not found, using defaults")
        return document

    for line in _read_lines(config_path):
        parsed = parse_line(line)
        if parsed is None:
            continue
        name, value = parsed
        document.fields[name] = value

    return document


def quote_value(value: str) -> str:
    """Single-quote everything except :symbols, =expressions and numbers."""
    if value.startswith(':') or value.startswith('=') or UNQUOTED_VALUE_PATTERN.match(value):
        return value
    return f"'{value}'"


def render_line(name: str, value: str) -> str:
    return f"{name}{FIELD_SEPARATOR}{quote_value(value)}"


def _leading_key(line: str) -> Optional[str]:
    match = LEADING_KEY_PATTERN.match(line)
    return match.group(1) if match else None


def _upsert(lines: List[str], name: str, rendered: str) -> List[str]:
    """Replace the first line keyed on name, drop later duplicates, else append."""
    result = []
    replaced = False
    for line in lines:
        if _leading_key(line) == name:
            if not replaced:
                result.append(rendered)
                replaced = True
            continue
        result.append(line)
    if not replaced:
        result.append(rendered)
    return result


def save_config(document: ConfigDocument, path: Union[str, Path],
                mode: Optional[SaveMode] = None) -> Path:
    """
    Save a ConfigDocument to path.

    Args:
        document: Document to persist
        path: Destination client.rb
        mode: SaveMode.APPEND merges into the existing lines,
              SaveMode.OVERWRITE starts from an empty file.
              Required when the destination already exists.

    Returns:
        Path written

    Raises:
        ConfigExistsError: If path exists and no mode was given
        OSError: If the existing file cannot be removed or path is not writable
    """
    config_path = Path(path)

    if config_path.exists() and mode not in (SaveMode.APPEND, SaveMode.OVERWRITE):
        raise ConfigExistsError(
            f"Config file already exists: {config_path}. "
            "Choose append to merge into it or overwrite to replace it."
        )

    if mode == SaveMode.OVERWRITE and config_path.exists():
        config_path.unlink()

    lines: List[str] = []
    if mode == SaveMode.APPEND and config_path.exists():
        lines = _read_lines(config_path)

    for name, value in document.merged().items():
        if not value:
            continue
        lines = _upsert(lines, name, render_line(name, value))

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w', encoding=FILE_ENCODING, errors=FILE_ERRORS, newline='') as f:
        f.write('\n'.join(lines))

    logger.info(f"Wrote {config_path} ({mode.value if mode else 'new'})")
    return config_path
