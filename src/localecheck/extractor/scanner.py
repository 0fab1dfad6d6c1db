"""Source tree scanning.

:class:`KeyExtractor` walks a source tree and yields :class:`SourceReference`
values lazily. Every call to :meth:`KeyExtractor.extract` re-walks the tree;
nothing is cached between runs. Directory traversal is sorted so repeated runs
over an unchanged tree produce the same sequence.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from localecheck.errors import AuditWarning, ErrorCode, FileSystemError
from localecheck.extractor.rules import ExtractionRule, builtin_rules, is_shipped
from localecheck.keys import normalize_key, unescape_literal
from localecheck.types import WarningKind

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDES: tuple[str, ...] = (
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "build",
    "dist",
    "Pods",
    "DerivedData",
    ".build",
    ".venv",
    "venv",
    "__pycache__",
)


@dataclass(frozen=True, order=True)
class SourceReference:
    """Where a translatable string was found.

    Attributes:
        path: File path, relative to the scanned root (POSIX separators)
        line: 1-based line number of the match start
        raw_text: Captured text after escape decoding
        rule: Name of the rule that produced the match
    """

    path: str
    line: int
    raw_text: str
    rule: str = field(default="", compare=False)

    @property
    def key(self) -> str:
        return normalize_key(self.raw_text)

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "line": self.line,
            "raw_text": self.raw_text,
            "rule": self.rule,
        }


class KeyExtractor:
    """Extract translation keys from a source tree.

    Example:
        >>> extractor = KeyExtractor("ios/App")
        >>> refs = list(extractor.extract())
        >>> extractor.warnings
        []

    Args:
        root: Directory to scan
        rules: Rules to apply. ``None`` selects built-in rules automatically:
            a rule is active when the tree holds at least one file it handles.
        exclude: Glob patterns matched against directory and file names
        extra_rules: Rules applied in addition to the selected ones (custom
            rules from configuration)
    """

    def __init__(
        self,
        root: str | Path,
        rules: Iterable[ExtractionRule] | None = None,
        exclude: Iterable[str] = DEFAULT_EXCLUDES,
        extra_rules: Iterable[ExtractionRule] = (),
    ) -> None:
        self.root = Path(root)
        self.explicit_rules = list(rules) if rules is not None else None
        self.extra_rules = list(extra_rules)
        self.exclude = tuple(exclude)
        self.warnings: list[AuditWarning] = []

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def _check_root(self) -> None:
        if not self.root.exists():
            raise FileSystemError(
                f"Source root not found: {self.root}",
                path=self.root,
                code=ErrorCode.FILE_NOT_FOUND,
            )
        if not self.root.is_dir():
            raise FileSystemError(f"Source root is not a directory: {self.root}", path=self.root)
        if not os.access(self.root, os.R_OK | os.X_OK):
            raise FileSystemError(f"Permission denied: {self.root}", path=self.root)

    def _excluded(self, name: str) -> bool:
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.exclude)

    def iter_files(self) -> Iterator[Path]:
        """Yield candidate files under the root in sorted order."""
        self._check_root()

        def _on_error(error: OSError) -> None:
            if Path(error.filename or "") == self.root:
                raise FileSystemError(f"Cannot read source root: {self.root}", path=self.root)
            self._warn(WarningKind.UNREADABLE_FILE, f"directory skipped: {error.strerror}", error.filename)

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=_on_error):
            dirnames[:] = sorted(d for d in dirnames if not self._excluded(d))
            for filename in sorted(filenames):
                if not self._excluded(filename):
                    yield Path(dirpath) / filename

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    def _warn(self, kind: WarningKind, message: str, path: str | None = None) -> None:
        warning = AuditWarning(kind=kind, message=message, path=path)
        logger.warning("%s", warning)
        self.warnings.append(warning)

    # -------------------------------------------------------------------------
    # Extraction
    # -------------------------------------------------------------------------

    def active_rules(self, files: list[Path]) -> list[ExtractionRule]:
        """Rules to apply to ``files``."""
        if self.explicit_rules is not None:
            selected = list(self.explicit_rules)
        else:
            names = [f.name for f in files]
            selected = [rule for rule in builtin_rules() if any(rule.handles(n) for n in names)]
        taken = {rule.name for rule in selected}
        return selected + [rule for rule in self.extra_rules if rule.name not in taken]

    def extract(self) -> Iterator[SourceReference]:
        """Yield source references, deduplicated by (file, line, key).

        Warnings collected during the walk are available on :attr:`warnings`
        once the iterator is exhausted.
        """
        self.warnings = []
        files = list(self.iter_files())
        rules = self.active_rules(files)
        matched_files: dict[str, int] = defaultdict(int)
        matched_patterns: dict[tuple[str, str], int] = defaultdict(int)
        logger.debug("Scanning %d files under %s with rules %s", len(files), self.root, [r.name for r in rules])

        for path in files:
            applicable = [rule for rule in rules if rule.handles(path.name)]
            if not applicable:
                continue
            relative = self._relative(path)
            text = self._read(path, relative)
            if text is None:
                continue

            seen: set[tuple[int, str]] = set()
            for rule in applicable:
                hit_patterns: set[str] = set()
                for raw in rule.apply(text):
                    hit_patterns.add(raw.pattern)
                    captured = unescape_literal(raw.text) if rule.decode_escapes else raw.text
                    line = text.count("\n", 0, raw.offset) + 1
                    ident = (line, normalize_key(captured))
                    if ident in seen:
                        continue
                    seen.add(ident)
                    yield SourceReference(path=relative, line=line, raw_text=captured, rule=rule.name)
                if hit_patterns:
                    matched_files[rule.name] += 1
                for pattern in hit_patterns:
                    matched_patterns[(rule.name, pattern)] += 1

        for rule in rules:
            if not matched_files[rule.name]:
                self._warn(
                    WarningKind.PATTERN,
                    f"rule {rule.name!r} ({', '.join(rule.suffixes)}) matched zero files",
                )
            elif not is_shipped(rule):
                # Custom rules are also checked per pattern
                for pattern in rule.patterns:
                    if not matched_patterns[(rule.name, pattern)]:
                        self._warn(
                            WarningKind.PATTERN,
                            f"rule {rule.name!r} pattern {pattern!r} matched zero files",
                        )

    def _read(self, path: Path, relative: str) -> str | None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except UnicodeDecodeError:
            self._warn(WarningKind.UNREADABLE_FILE, "not valid UTF-8 text, skipped", relative)
        except OSError as e:
            self._warn(WarningKind.UNREADABLE_FILE, f"{e.strerror or e}, skipped", relative)
        return None


def extract_references(
    root: str | Path,
    rules: Iterable[ExtractionRule] | None = None,
    exclude: Iterable[str] = DEFAULT_EXCLUDES,
    extra_rules: Iterable[ExtractionRule] = (),
) -> tuple[list[SourceReference], list[AuditWarning]]:
    """Run a full extraction and return sorted references plus warnings."""
    extractor = KeyExtractor(root, rules=rules, exclude=exclude, extra_rules=extra_rules)
    references = sorted(extractor.extract())
    return references, list(extractor.warnings)


def group_by_key(references: Iterable[SourceReference]) -> dict[str, list[SourceReference]]:
    """Group references under their normalized key, keys sorted."""
    grouped: dict[str, list[SourceReference]] = defaultdict(list)
    for ref in references:
        grouped[ref.key].append(ref)
    return {key: sorted(grouped[key]) for key in sorted(grouped)}
