"""cpanfile parser.

Reads the prerequisite statements of a ``cpanfile`` without evaluating it as
Perl. Supported syntax::

    requires 'Plack', '1.0';
    requires "JSON" => ">= 2.00, < 3.00";
    recommends 'JSON::XS', 2;
    test_requires 'Test::Deep';
    on 'test' => sub {
        requires 'Test::More', '0.98';
    };
    feature 'sqlite', 'SQLite support' => sub {
        requires 'DBD::SQLite';
    };

Prerequisites are merged across the ``runtime``, ``build`` and ``test``
phases for the ``requires`` and ``recommends`` relationships. Optional
feature blocks, ``configure`` and ``develop`` prerequisites, suggestions and
conflicts are left out.
"""

from __future__ import annotations

import re
from pathlib import Path

from parinstall.exceptions import ManifestError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_CPANFILE: str = "cpanfile"

MERGED_PHASES: frozenset[str] = frozenset({"runtime", "build", "test"})
MERGED_TYPES: frozenset[str] = frozenset({"requires", "recommends"})

# keyword -> (fixed phase or None for the enclosing one, relationship)
_KEYWORDS: dict[str, tuple[str | None, str]] = {
    "requires": (None, "requires"),
    "recommends": (None, "recommends"),
    "suggests": (None, "suggests"),
    "conflicts": (None, "conflicts"),
    "test_requires": ("test", "requires"),
    "build_requires": ("build", "requires"),
    "configure_requires": ("configure", "requires"),
    "author_requires": ("develop", "requires"),
}

_FEATURE = "feature"

_KEYWORD_ALT = "|".join(sorted(_KEYWORDS, key=len, reverse=True))

_TOKEN_RE = re.compile(
    r"(?P<on>\bon\s*\(?\s*(?P<oq>['\"]?)(?P<phase>\w+)(?P=oq)\s*(?:,|=>)\s*sub\s*\{)"
    r"|(?P<feature>\bfeature\b[^{;]*?\bsub\s*\{)"
    rf"|(?P<stmt>\b(?:{_KEYWORD_ALT})\b[^;]*;)"
    r"|(?P<close>\})"
)

_STATEMENT_RE = re.compile(
    rf"(?P<kw>{_KEYWORD_ALT})\s*\(?\s*"
    r"(?P<q>['\"])(?P<name>[\w:.\-]+)(?P=q)\s*"
    r"(?:(?:,|=>)\s*(?P<ver>'[^']*'|\"[^\"]*\"|[\w.]+)\s*)?"
    r"\)?\s*;",
    re.DOTALL,
)

_PLAIN_VERSION_RE = re.compile(r"^v?\d+(?:[._]\d+)*$")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_cpanfile(path: str | Path = DEFAULT_CPANFILE) -> dict[str, str]:
    """Read and parse the cpanfile at *path*.

    Raises:
        ManifestError: If the file is missing, unreadable, or malformed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ManifestError(f"Manifest not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Cannot read manifest {path}: {exc}") from exc
    return parse_cpanfile(text, source=str(path))


def parse_cpanfile(text: str, *, source: str = DEFAULT_CPANFILE) -> dict[str, str]:
    """Parse cpanfile *text* into a merged name -> version constraint map.

    An empty constraint means any version.

    Args:
        text: cpanfile contents.
        source: Name used in error messages.

    Returns:
        Merged requirements, in first-seen order.

    Raises:
        ManifestError: On a malformed prerequisite statement or unbalanced
            blocks.
    """
    text = _strip_comments(text)
    # Stack of open blocks: a phase name or _FEATURE.
    blocks: list[str] = []
    merged: dict[str, str] = {}

    for match in _TOKEN_RE.finditer(text):
        line = text.count("\n", 0, match.start()) + 1
        if match.group("on"):
            blocks.append(match.group("phase"))
        elif match.group("feature"):
            blocks.append(_FEATURE)
        elif match.group("close"):
            if not blocks:
                raise ManifestError(f"{source}:{line}: unbalanced '}}'")
            blocks.pop()
        else:
            stmt = _STATEMENT_RE.fullmatch(match.group("stmt").strip())
            if stmt is None:
                raise ManifestError(
                    f"{source}:{line}: cannot parse prerequisite "
                    f"{match.group('stmt').strip()!r}"
                )
            if _FEATURE in blocks:
                continue
            fixed_phase, relationship = _KEYWORDS[stmt.group("kw")]
            phase = fixed_phase or (blocks[-1] if blocks else "runtime")
            if phase not in MERGED_PHASES or relationship not in MERGED_TYPES:
                continue
            name = stmt.group("name")
            version = _normalize_version(stmt.group("ver"))
            merged[name] = _combine(merged[name], version) if name in merged else version

    if blocks:
        raise ManifestError(f"{source}: unclosed '{blocks[-1]}' block")
    return merged


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _strip_comments(text: str) -> str:
    """Remove ``#`` comments that are not inside a quoted string."""
    out: list[str] = []
    for raw in text.splitlines():
        quote = ""
        cut = len(raw)
        for i, ch in enumerate(raw):
            if quote:
                if ch == quote:
                    quote = ""
            elif ch in "'\"":
                quote = ch
            elif ch == "#":
                cut = i
                break
        out.append(raw[:cut])
    return "\n".join(out)


def _normalize_version(raw: str | None) -> str:
    if raw is None:
        return ""
    version = " ".join(raw.strip("'\"").split())
    return "" if version == "0" else version


def _version_tuple(version: str) -> tuple[int, ...]:
    """Sort key for perl versions.

    Decimal versions compare digit groups of three after the point, so
    "1.10" (1.100) sorts below "1.9" (1.900). Dotted versions ("v1.2.3",
    "1.2.3") compare part by part.
    """
    version = version.replace("_", "")
    if version.startswith("v") or version.count(".") > 1:
        return tuple(int(part) for part in version.lstrip("v").split("."))
    whole, _, frac = version.partition(".")
    frac += "0" * (-len(frac) % 3)
    return (int(whole),) + tuple(int(frac[i:i + 3]) for i in range(0, len(frac), 3))


def _combine(current: str, new: str) -> str:
    """Merge two constraints on the same module."""
    if not current:
        return new
    if not new or new == current:
        return current
    if _PLAIN_VERSION_RE.match(current) and _PLAIN_VERSION_RE.match(new):
        # Two minimums: the higher one wins.
        return max(current, new, key=_version_tuple)
    return f"{current}, {new}"
