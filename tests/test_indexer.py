"""End-to-end tests for the tag indexer."""

from pathlib import Path
from typing import Dict, List, Optional

from taggo.config_manager import TagSettings
from taggo.errors import GoParseError
from taggo.indexer import TagIndexer
from taggo.parser import GoTreeSitterParser, Parser
from taggo.syntax import FuncDecl, Ident, Position, SourceFile


def _split(line: bytes) -> List[bytes]:
    # Patterns may contain tabs, so only the outer columns are split.
    name, path, rest = line.split(b"\t", 2)
    pattern, kind, scope = rest.rsplit(b"\t", 2)
    return [name, path, pattern, kind, scope]


def _body(result_or_tags) -> List[List[bytes]]:
    tags = getattr(result_or_tags, "tags", result_or_tags)
    return [_split(line) for line in tags.lines]


def _by_name(rows) -> Dict[bytes, List[bytes]]:
    return {row[0]: row for row in rows}


class FakeParser(Parser):
    """Returns prebuilt trees and fails for unknown paths."""

    def __init__(self, trees: Dict[str, SourceFile]) -> None:
        self.trees = trees
        self.parsed: List[str] = []

    def supports_extension(self, ext: str) -> bool:
        return ext == ".go"

    def parse_file(self, path: str, source: Optional[bytes] = None) -> SourceFile:
        self.parsed.append(path)
        if path not in self.trees:
            raise GoParseError(path, "unexpected file")
        return self.trees[path]


def test_point_scenarios(point_go: Path):
    """Test struct, member, method, const and var tags for a small file."""
    path = str(point_go)
    rows = _body(TagIndexer().index_paths([path]))
    tags = _by_name(rows)

    assert tags[b"Point"] == [b"Point", path.encode(), b'/^type Point struct { X int; Y int }$/;"', b"s", b""]
    assert tags[b"X"][3:] == [b"m", b"struct:Point"]
    assert tags[b"Y"][3:] == [b"m", b"struct:Point"]
    assert tags[b"X"][2] == tags[b"Point"][2]

    assert tags[b"String"] == [
        b"String", path.encode(), b'/^func (p *Point) String() string {$/;"', b"f", b"class:Point",
    ]
    assert point_go.read_bytes().split(b"\n")[9] == b"func (p *Point) String() string {"

    assert tags[b"MaxRetries"][2:] == [b'/^const MaxRetries = 5$/;"', b"d", b""]
    assert tags[b"zero"][3] == b"v"
    assert len(rows) == 6


def test_sample_project_kinds(temp_dir: Path, sample_go_code: str):
    """Test the kind and scope of every tag in the shapes sample."""
    path = temp_dir / "shapes.go"
    path.write_text(sample_go_code)
    rows = _body(TagIndexer().index_paths([str(path)]))
    summary = sorted((row[0].decode(), row[3].decode(), row[4].decode()) for row in rows)

    assert summary == sorted([
        ("Circle", "s", ""),
        ("Radius", "m", "struct:Circle"),
        ("Center", "m", "struct:Circle"),
        ("Edge", "m", "struct:Circle"),
        ("Label", "m", "struct:Circle"),
        ("Shape", "c", ""),
        ("Area", "f", "class:Shape"),
        ("Perimeter", "f", "class:Shape"),
        ("List", "s", ""),
        ("items", "m", "struct:List"),
        ("Len", "f", "class:List"),
        ("Kind", "f", "class:Circle"),
        ("Meters", "t", ""),
        ("Lookup", "t", ""),
        ("Pi", "v", ""),
        ("E", "v", ""),
        ("Area", "f", ""),
    ])


def test_indented_lines_keep_leading_tab(temp_dir: Path):
    """Test that tab-indented members and methods keep the tab in the pattern."""
    path = temp_dir / "shape.go"
    path.write_text(
        "package shape\n\n"
        "type Shape interface {\n\tArea() float64\n}\n\n"
        "type Box struct {\n\tWidth int\n}\n"
    )
    result = TagIndexer().index_paths([str(path)])
    lines = {line.split(b"\t", 1)[0]: line for line in result.tags.lines}

    assert lines[b"Area"] == b"\t".join([
        b"Area", str(path).encode(), b'/^\tArea() float64$/;"', b"f", b"class:Shape",
    ])
    assert _by_name(_body(result))[b"Width"][2:] == [b'/^\tWidth int$/;"', b"m", b"struct:Box"]


def test_output_is_sorted_and_deterministic(sample_project_path: Path):
    """Test that two runs over the same tree render identical sorted output."""
    indexer = TagIndexer(TagSettings(recurse=True))
    first = indexer.index_paths([str(sample_project_path)])
    second = TagIndexer(TagSettings(recurse=True)).index_paths([str(sample_project_path)])
    assert list(first.tags.lines) == sorted(first.tags.lines)
    assert first.tags.render() == second.tags.render()


def test_parse_failure_is_not_fatal(sample_project_path: Path):
    """Test that a broken file is skipped while the rest is still tagged."""
    result = TagIndexer(TagSettings(recurse=True)).index_paths([str(sample_project_path)])
    names = [row[0] for row in _body(result)]
    assert b"Broken" not in names
    assert b"Golden" in names
    assert names.count(b"New") == 2
    assert result.failed == 1
    assert result.first_error.path.endswith("broken.go")
    assert len(result.files) == 4


def test_skip_dirs_setting_prunes_walk(sample_project_path: Path):
    """Test that directories listed in skip_dirs are not indexed."""
    settings = TagSettings(recurse=True, skip_dirs=frozenset({"testdata"}))
    result = TagIndexer(settings).index_paths([str(sample_project_path)])
    names = [row[0] for row in _body(result)]
    assert b"Golden" not in names
    assert len(result.files) == 3


def test_same_function_in_two_files(temp_dir: Path):
    """Test that duplicate symbols from different files are both kept."""
    a = temp_dir / "a.go"
    b = temp_dir / "b.go"
    a.write_text("package a\n\nfunc Run() {}\n")
    b.write_text("package b\nfunc Run() {}\n")
    rows = _body(TagIndexer().index_paths([str(b), str(a)]))
    assert [(row[0], row[1]) for row in rows] == [
        (b"Run", str(a).encode()),
        (b"Run", str(b).encode()),
    ]


def test_no_input_emits_header_only():
    """Test that no input still produces the five header lines."""
    result = TagIndexer().index_paths([])
    assert len(result.tags) == 0
    assert result.first_error is None
    assert result.tags.render().count(b"\n") == 5


def test_injected_parser_and_missing_source_file(temp_dir: Path):
    """Test hand-built trees without Tree-sitter; unreadable lines degrade."""
    real = temp_dir / "real.go"
    real.write_text("package real\n\nfunc Here() {}\n")
    ghost = temp_dir / "ghost.go"
    ghost.write_text("")
    trees = {
        str(real): SourceFile(str(real), "real", [
            FuncDecl(Ident("Here", Position(str(real), 3, 6)), Position(str(real), 3, 1)),
            FuncDecl(Ident("Beyond", Position(str(real), 99, 6)), Position(str(real), 99, 1)),
        ]),
        str(ghost): SourceFile(str(ghost), "ghost", [
            FuncDecl(Ident("Gone", Position(str(ghost), 1, 6)), Position(str(ghost), 1, 1)),
        ]),
    }
    indexer = TagIndexer(parser=FakeParser(trees))
    tags = _by_name(_body(indexer.index_paths([str(real), str(ghost)])))

    assert tags[b"Here"][2] == b'/^func Here() {}$/;"'
    assert tags[b"Beyond"][2] == b'/^$/;"'
    assert tags[b"Gone"][2] == b'/^$/;"'


def test_files_the_parser_does_not_handle_are_skipped(temp_dir: Path):
    """Test that configured extensions the parser rejects never reach it."""
    go_file = temp_dir / "main.go"
    go_file.write_text("package main\n\nfunc Main() {}\n")
    gox_file = temp_dir / "extra.gox"
    gox_file.write_text("package main\n\nfunc Extra() {}\n")
    trees = {
        str(go_file): SourceFile(str(go_file), "main", [
            FuncDecl(Ident("Main", Position(str(go_file), 3, 6)), Position(str(go_file), 3, 1)),
        ]),
    }
    parser = FakeParser(trees)
    settings = TagSettings(extensions=frozenset({".go", ".gox"}))
    result = TagIndexer(settings, parser=parser).index_paths([str(go_file), str(gox_file)])

    assert parser.parsed == [str(go_file)]
    assert result.files == [str(go_file)]
    assert result.failed == 0
    assert result.first_error is None
    assert [row[0] for row in _body(result)] == [b"Main"]


def test_configured_extensions_reach_default_parser(temp_dir: Path):
    """Test that the default parser accepts every configured extension."""
    gox_file = temp_dir / "extra.gox"
    gox_file.write_text("package main\n\nfunc Extra() {}\n")
    settings = TagSettings(extensions=frozenset({".go", ".gox"}))
    indexer = TagIndexer(settings)

    assert isinstance(indexer.parser, GoTreeSitterParser)
    assert indexer.parser.supports_extension(".gox")
    result = indexer.index_paths([str(gox_file)])
    assert [row[0] for row in _body(result)] == [b"Extra"]
    assert TagIndexer().parser.supports_extension(".gox") is False


def test_escape_patterns_setting(temp_dir: Path):
    """Test that escape_patterns escapes slashes in search patterns."""
    path = temp_dir / "url.go"
    path.write_text('package url\n\nconst Base = "http://x/y"\n')
    plain = _by_name(_body(TagIndexer().index_paths([str(path)])))
    escaped = _by_name(_body(TagIndexer(TagSettings(escape_patterns=True)).index_paths([str(path)])))
    assert plain[b"Base"][2] == b'/^const Base = "http://x/y"$/;"'
    assert escaped[b"Base"][2] == b'/^const Base = "http:\\/\\/x\\/y"$/;"'


def test_custom_header(point_go: Path):
    """Test that header identity comes from the settings."""
    settings = TagSettings(program_name="gotags", program_author="me", program_url="http://example.com")
    rendered = TagIndexer(settings).index_paths([str(point_go)]).tags.render()
    assert b"!_TAG_PROGRAM_NAME\tgotags\n" in rendered
    assert rendered.startswith(b"!_TAG_FILE_FORMAT\t2\n!_TAG_FILE_SORTED\t1\n!_TAG_PROGRAM_AUTHOR\tme\n")
