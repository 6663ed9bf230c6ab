import logging
from pathlib import Path
from typing import Any, Mapping

from transcoder import file_utils
from transcoder.model import option_keys
from transcoder.option_resolver import is_requested

log = logging.getLogger(__name__)

# Unit appended to the rendered value
SUFFIX_MAP = {
    option_keys.FRAME_RATE: "fps",
    option_keys.BIT_RATE: "bps",
    option_keys.HEIGHT: "h",
    option_keys.WIDTH: "w",
    option_keys.TIME_IN_SECS: "s",
}

EXCLUDED_KEYS = frozenset({option_keys.FILE_SUFFIX, option_keys.SHARPEN})

# Option values must not turn the name into a path
PATH_SEPARATOR_REPLACEMENT = "-"

# Keys not listed here follow in alphabetical order
CANONICAL_KEY_ORDER = (
    option_keys.FRAME_RATE,
    option_keys.BIT_RATE,
    option_keys.WIDTH,
    option_keys.HEIGHT,
    option_keys.ASPECT_RATIO,
    option_keys.LETTERBOX_COLOR,
    option_keys.TIME_IN_SECS,
)


def canonical_keys(options: Mapping[str, Any]) -> list[str]:
    known = [key for key in CANONICAL_KEY_ORDER if key in options]
    others = sorted(key for key in options if key not in CANONICAL_KEY_ORDER)
    return known + others


def encode_filename(source_path: Path, options: Mapping[str, Any]) -> str:
    """
    Build the derivative file name for a source and a complete option set.

    The source name without extension is followed by one ``_token`` per requested
    option in canonical key order, then the ``fileSuffix`` option verbatim.
    ``True`` renders as the key name and ``False`` as ``no`` + key name.
    """
    tokens = [file_utils.get_file_name_without_extension(Path(source_path))]

    for key in canonical_keys(options):
        if key in EXCLUDED_KEYS:
            continue
        token = _render_token(key, options[key])
        if token is not None:
            tokens.append(token)

    file_name = "_".join(tokens) + _strip_separators(str(options.get(option_keys.FILE_SUFFIX) or ""))
    log.debug(f"Derivative name for {Path(source_path).name}: {file_name}")
    return file_name


def _render_token(key: str, value: Any) -> str | None:
    if isinstance(value, bool):
        return key if value else "no" + key

    if not is_requested(value):
        return None

    if isinstance(value, float) and value.is_integer():
        value = int(value)

    return _strip_separators(f"{value}{SUFFIX_MAP.get(key, '')}")


def _strip_separators(text: str) -> str:
    return text.replace("/", PATH_SEPARATOR_REPLACEMENT).replace("\\", PATH_SEPARATOR_REPLACEMENT)
