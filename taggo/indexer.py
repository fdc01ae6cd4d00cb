"""Indexer coordinating parsing, classification and tag emission."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .classifier import classify_file
from .config_manager import TagSettings
from .errors import GoParseError
from .lines import LineResolver
from .models import TagRecord, TagSite
from .parser import GoTreeSitterParser, Parser, collect_source_files, parse_files
from .syntax import SourceFile
from .tags import TagBuilder, TagFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexResult:
    tags: TagFile
    files: List[str]
    first_error: Optional[GoParseError] = None
    failed: int = 0


class TagIndexer:
    """Builds a sorted tag file from Go sources.

    The parser and line resolver are injected so the pipeline can run on
    hand-built declaration trees.
    """

    def __init__(
        self,
        settings: Optional[TagSettings] = None,
        parser: Optional[Parser] = None,
        resolver: Optional[LineResolver] = None,
    ) -> None:
        self.settings = settings or TagSettings()
        self._parser = parser
        self.resolver = resolver or LineResolver()

    @property
    def parser(self) -> Parser:
        if self._parser is None:
            self._parser = GoTreeSitterParser(self.settings.extensions)
        return self._parser

    def _supported(self, path: str) -> bool:
        ext = os.path.splitext(path)[1]
        if self.parser.supports_extension(ext):
            return True
        logger.debug("Skipping %s: parser does not handle %s files", path, ext)
        return False

    def record(self, site: TagSite) -> TagRecord:
        """Resolve the search pattern for *site*."""
        pattern = self.resolver.resolve(site.pos.filename, site.pos.line)
        return TagRecord(
            name=site.name,
            file_path=site.pos.filename,
            pattern=pattern,
            kind=site.kind,
            scope=site.scope,
        )

    def index_sources(self, sources: Iterable[SourceFile]) -> TagFile:
        builder = TagBuilder(escape_patterns=self.settings.escape_patterns)
        for source in sources:
            for site in classify_file(source):
                builder.add(self.record(site))
            self.resolver.clear()
        return builder.build(self.settings.header)

    def index_paths(self, paths: Iterable[str]) -> IndexResult:
        """Discover, parse and tag every Go file reachable from *paths*."""
        discovered = collect_source_files(
            paths,
            recurse=self.settings.recurse,
            extensions=self.settings.extensions,
            skip_dirs=self.settings.skip_dirs,
        )
        files = [path for path in discovered if self._supported(path)]
        parsed = parse_files(self.parser, files) if files else None
        sources = parsed.files if parsed else []
        tags = self.index_sources(sources)
        logger.info("Indexed %d of %d files: %d tags", len(sources), len(files), len(tags))
        return IndexResult(
            tags=tags,
            files=files,
            first_error=parsed.first_error if parsed else None,
            failed=parsed.failed if parsed else 0,
        )
