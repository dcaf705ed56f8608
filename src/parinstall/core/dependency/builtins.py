"""Built-in filter: names that are never resolved or installed.

Two sources feed the filter. The ignore set holds pragmas and pseudo-modules
that the registry either cannot resolve (``perl`` itself) or that must never
be upgraded from CPAN. The core set holds modules that ship with the perl
interpreter; requiring them in a cpanfile is satisfied by perl itself.
"""

from __future__ import annotations

import logging
from typing import Iterable

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_IGNORE: frozenset[str] = frozenset({
    "perl", "strict", "warnings", "parent", "base", "overload",
    "lib", "utf8", "constant", "B", "blib", "threads",
})

# Registry distribution name for modules that only ship inside perl.
CORE_DISTRIBUTION: str = "perl"

CORE_MODULES: frozenset[str] = frozenset({
    # Pragmas
    "attributes", "autodie", "autouse", "bigint", "bignum", "bigrat",
    "bytes", "charnames", "diagnostics", "encoding", "feature", "fields",
    "filetest", "if", "integer", "less", "locale", "mro", "open", "ops",
    "re", "sigtrap", "sort", "subs", "vars", "version", "vmsish",
    "warnings::register", "threads::shared",
    # Core modules
    "AutoLoader", "Benchmark", "Carp", "Carp::Heavy", "Class::Struct",
    "Config", "Cwd", "Data::Dumper", "DB_File", "Digest", "Digest::MD5",
    "Digest::SHA", "DirHandle", "Encode", "English", "Env", "Errno",
    "Exporter", "Exporter::Heavy", "ExtUtils::MakeMaker",
    "ExtUtils::Manifest", "Fcntl", "File::Basename", "File::Compare",
    "File::Copy", "File::Find", "File::Glob", "File::Path", "File::Spec",
    "File::Spec::Functions", "File::Temp", "File::stat", "FileHandle",
    "FindBin", "Getopt::Long", "Getopt::Std", "Hash::Util", "I18N::LangTags",
    "IO", "IO::File", "IO::Handle", "IO::Select", "IO::Socket",
    "IO::Socket::INET", "IO::Socket::IP", "IO::Zlib", "IPC::Cmd",
    "IPC::Open2", "IPC::Open3", "JSON::PP", "List::Util", "Locale::Maketext",
    "MIME::Base64", "Math::BigFloat", "Math::BigInt", "Math::Complex",
    "Math::Trig", "Memoize", "Module::CoreList", "Module::Load",
    "Module::Load::Conditional", "Module::Metadata", "Net::Ping",
    "Opcode", "POSIX", "Params::Check", "Parse::CPAN::Meta", "PerlIO",
    "Pod::Usage", "Safe", "Scalar::Util", "SelectSaver", "Socket",
    "Storable", "Symbol", "Sys::Hostname", "Term::ANSIColor", "Test",
    "Test::Builder", "Test::Harness", "Test::More", "Test::Simple",
    "Text::Abbrev", "Text::Balanced", "Text::ParseWords", "Text::Wrap",
    "Tie::Array", "Tie::Hash", "Tie::Scalar", "Time::HiRes", "Time::Local",
    "Time::Piece", "Time::gmtime", "Time::localtime", "UNIVERSAL",
    "Unicode::Normalize", "Unicode::UCD", "XSLoader", "HTTP::Tiny",
    "CPAN::Meta", "CPAN::Meta::Requirements", "CPAN::Meta::YAML",
})


# ---------------------------------------------------------------------------
# BuiltinFilter
# ---------------------------------------------------------------------------


class BuiltinFilter:
    """Decides whether a module name is built in and must be skipped.

    Args:
        ignore: Names that are always skipped. Defaults to
            ``DEFAULT_IGNORE``.
        core_modules: Names that ship with perl. Defaults to
            ``CORE_MODULES``.
        extra_ignore: Additional names to skip, typically from ``--skip``.
    """

    def __init__(
        self,
        ignore: Iterable[str] | None = None,
        core_modules: Iterable[str] | None = None,
        extra_ignore: Iterable[str] = (),
    ) -> None:
        base = DEFAULT_IGNORE if ignore is None else frozenset(ignore)
        self._ignore = frozenset(base) | frozenset(extra_ignore)
        self._core = CORE_MODULES if core_modules is None else frozenset(core_modules)

    @property
    def ignored(self) -> frozenset[str]:
        return self._ignore

    def is_ignored(self, name: str) -> bool:
        return name in self._ignore

    def is_core(self, name: str) -> bool:
        return name in self._core

    def should_skip(self, name: str) -> bool:
        """Return True if *name* is ignored or part of the perl core."""
        return self.is_ignored(name) or self.is_core(name)

    def is_core_distribution(self, distribution: str) -> bool:
        """Return True if the registry says *distribution* is perl itself."""
        return distribution == CORE_DISTRIBUTION
