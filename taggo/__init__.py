"""taggo: Exuberant-Ctags compatible tags files for Go source."""

__version__ = "0.1.0"

from .classifier import classify_decl, classify_file, type_name
from .indexer import IndexResult, TagIndexer
from .lines import LineResolver, content_of_line
from .models import Kind, Scope, TagRecord, TagSite
from .tags import TagBuilder, TagFile, TagHeader, escape_pattern, synthesize

__all__ = [
    "__version__",
    "classify_decl",
    "classify_file",
    "type_name",
    "IndexResult",
    "TagIndexer",
    "LineResolver",
    "content_of_line",
    "Kind",
    "Scope",
    "TagRecord",
    "TagSite",
    "TagBuilder",
    "TagFile",
    "TagHeader",
    "escape_pattern",
    "synthesize",
]
