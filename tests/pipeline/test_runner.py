# topmark:header:start
#
#   project      : Squiggle
#   file         : test_runner.py
#   file_relpath : tests/pipeline/test_runner.py
#   license      : MIT
#   copyright    : (c) 2026 Squiggle contributors
#
# topmark:header:end

"""Tests for `squiggle.pipeline.runner`: in-memory and file transforms."""

from __future__ import annotations

import io
import os
from typing import TYPE_CHECKING

import pytest

from squiggle.annotate.analyzer import TwoslashAnalyzer
from squiggle.config.model import MutableConfig
from squiggle.config.types import UnterminatedPolicy
from squiggle.core.errors import UnterminatedBlockError
from squiggle.core.notices import NoticeLevel
from squiggle.pipeline.runner import (
    build_driver,
    transform_file,
    transform_into_file,
    transform_stream,
    transform_text,
)
from tests.conftest import FakeAnalyzer, make_config, mark_pipeline

if TYPE_CHECKING:
    from pathlib import Path

DOC = "# Demo\n\n```ts\nlet a = 1;\n```\n\n```sh\necho hi\n```\n"


def _leftovers(directory: Path) -> list[str]:
    return sorted(p.name for p in directory.iterdir() if p.name.endswith(".tmp"))


def test_build_driver_defaults_to_twoslash() -> None:
    """Without an injected analyzer the Node.js bridge is used."""
    driver = build_driver(make_config(node_executable="node18"))

    analyzer = driver.annotator.analyzer
    assert isinstance(analyzer, TwoslashAnalyzer)
    assert analyzer.node_executable == "node18"


def test_build_driver_carries_config_notices(fake_analyzer: FakeAnalyzer) -> None:
    """Config warnings, then the config provenance, show up in the run notices."""
    config = MutableConfig.from_defaults().merge_with(
        MutableConfig.from_toml_dict({"colour": "red"}, source="squiggle.toml")
    ).freeze()

    driver = build_driver(config, fake_analyzer)

    notices = list(driver.notices)
    assert [n.level for n in notices] == [NoticeLevel.WARNING, NoticeLevel.INFO]
    assert "colour" in notices[0].message
    assert notices[1].message == "Using configuration from squiggle.toml"


@mark_pipeline
def test_transform_text(fake_analyzer: FakeAnalyzer) -> None:
    """In-memory transform returns the document and the run outcome."""
    text, result = transform_text(DOC, make_config(), analyzer=fake_analyzer)

    assert text == DOC
    assert result.stats.blocks_annotated == 1
    assert result.stats.lines_read == DOC.count("\n")
    assert len(result.notices) == 0


@mark_pipeline
def test_transform_stream_writes_as_it_goes(fake_analyzer: FakeAnalyzer) -> None:
    """Chunks are written to the output stream."""
    out = io.StringIO()

    result = transform_stream(io.StringIO(DOC), out, make_config(), analyzer=fake_analyzer)

    assert out.getvalue() == DOC
    assert result.stats.blocks_total == 1


@mark_pipeline
def test_transform_file_creates_destination(tmp_path: Path, fake_analyzer: FakeAnalyzer) -> None:
    """The destination is created and no temporary file is left behind."""
    source = tmp_path / "README.src.md"
    destination = tmp_path / "README.md"
    source.write_text(DOC, encoding="utf-8")

    transform_file(source, destination, make_config(), analyzer=fake_analyzer)

    assert destination.read_text(encoding="utf-8") == DOC
    assert _leftovers(tmp_path) == []


@mark_pipeline
def test_transform_file_in_place(tmp_path: Path, fake_analyzer: FakeAnalyzer) -> None:
    """Source and destination may be the same file."""
    path = tmp_path / "notes.md"
    path.write_text("a\r\nb\r\n", encoding="utf-8")

    transform_file(path, path, make_config(), analyzer=fake_analyzer)

    assert path.read_bytes() == b"a\nb\n"


@mark_pipeline
@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_transform_file_keeps_destination_mode(
    tmp_path: Path, fake_analyzer: FakeAnalyzer
) -> None:
    """Replacing the destination keeps its permission bits."""
    source = tmp_path / "in.md"
    destination = tmp_path / "out.md"
    source.write_text(DOC, encoding="utf-8")
    destination.write_text("old\n", encoding="utf-8")
    destination.chmod(0o640)

    transform_file(source, destination, make_config(), analyzer=fake_analyzer)

    assert destination.stat().st_mode & 0o777 == 0o640


@mark_pipeline
def test_fatal_error_leaves_destination_untouched(
    tmp_path: Path, fake_analyzer: FakeAnalyzer
) -> None:
    """Under the fatal policy the destination keeps its previous content."""
    source = tmp_path / "in.md"
    destination = tmp_path / "out.md"
    source.write_text("text\n```ts\nlet a = 1;\n", encoding="utf-8")
    destination.write_text("previous\n", encoding="utf-8")
    config = make_config(unterminated_policy=UnterminatedPolicy.FATAL)

    with pytest.raises(UnterminatedBlockError):
        transform_file(source, destination, config, analyzer=fake_analyzer)

    assert destination.read_text(encoding="utf-8") == "previous\n"
    assert _leftovers(tmp_path) == []


@mark_pipeline
def test_invalid_utf8_source(tmp_path: Path, fake_analyzer: FakeAnalyzer) -> None:
    """A source that is not UTF-8 fails without creating the destination."""
    source = tmp_path / "in.md"
    destination = tmp_path / "out.md"
    source.write_bytes(b"caf\xe9\n")

    with pytest.raises(UnicodeDecodeError):
        transform_file(source, destination, make_config(), analyzer=fake_analyzer)

    assert not destination.exists()
    assert _leftovers(tmp_path) == []


@mark_pipeline
def test_fatal_error_writes_nothing_to_stream(fake_analyzer: FakeAnalyzer) -> None:
    """Under the fatal policy no part of the document reaches the output stream."""
    out = io.StringIO()
    config = make_config(unterminated_policy=UnterminatedPolicy.FATAL)

    with pytest.raises(UnterminatedBlockError):
        transform_stream(
            io.StringIO("intro line\n\n```ts\nconst x = 1;\n"), out, config, analyzer=fake_analyzer
        )

    assert out.getvalue() == ""


@mark_pipeline
def test_fatal_policy_still_writes_complete_documents(fake_analyzer: FakeAnalyzer) -> None:
    """A document without unclosed blocks is written in full under the fatal policy."""
    out = io.StringIO()
    config = make_config(unterminated_policy=UnterminatedPolicy.FATAL)

    transform_stream(io.StringIO(DOC), out, config, analyzer=fake_analyzer)

    assert out.getvalue() == DOC


@mark_pipeline
@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_new_destination_gets_umask_default_mode(
    tmp_path: Path, fake_analyzer: FakeAnalyzer
) -> None:
    """A destination that did not exist is created with the usual umask-derived mode."""
    destination = tmp_path / "new.md"
    previous = os.umask(0o027)
    try:
        transform_into_file(io.StringIO(DOC), destination, make_config(), analyzer=fake_analyzer)
    finally:
        os.umask(previous)

    assert destination.stat().st_mode & 0o777 == 0o640
    assert _leftovers(tmp_path) == []
