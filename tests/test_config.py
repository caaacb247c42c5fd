import json
import re
from pathlib import Path

import pytest
from pydantic import ValidationError
from site_clipper.config import CrawlOptions, load_options


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("max_depth: 3\nmax_pages: 10", ".yaml", None),
        ("max_depth: 3\nmax_pages: 10", ".yml", None),
        (json.dumps({"max_depth": 3, "max_pages": 10}), ".json", None),
        ("max_pages: 0", ".yaml", ValidationError),
        ("max_depth: -1", ".yaml", ValidationError),
        ("unknown_key: 1", ".yaml", ValidationError),
        ("not: a: mapping", ".yaml", ValueError),
        ("::invalid yaml", ".yaml", TypeError),
        ("- a\n- b", ".yaml", TypeError),
        ("{broken json", ".json", ValueError),
        ("max_depth = 3", ".toml", ValueError),
    ],
)
def test_load_options_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_options(cfg_path)
    else:
        opts = load_options(cfg_path)
        assert isinstance(opts, CrawlOptions)
        assert opts.max_depth == 3
        assert opts.max_pages == 10
        assert opts.same_domain_only is True


def test_defaults():
    opts = CrawlOptions()
    assert opts.max_depth == 2
    assert opts.max_pages == 50
    assert opts.delay_between_requests == 1.0
    assert opts.request_timeout == 15.0
    assert opts.strategy_delay == 0.5
    assert opts.use_fallback_strategies is True
    assert opts.include_images is False
    assert opts.min_content_length == 100
    assert opts.exclude_patterns == [] and opts.include_patterns == []


def test_load_options_default_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_options(None) == CrawlOptions()


def test_load_options_default_present(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("max_pages: 7\n", encoding="utf-8")
    assert load_options(None).max_pages == 7


def test_explicit_path_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_options(tmp_path / "missing.yaml")


def test_patterns_are_compiled_and_serialized(tmp_path):
    cfg_path = write_file(
        tmp_path, 'exclude_patterns: ["/admin", "\\\\.php$"]\ninclude_patterns: ["/docs/"]', ".yaml"
    )
    opts = load_options(cfg_path)

    assert all(isinstance(p, re.Pattern) for p in opts.exclude_patterns)
    assert opts.exclude_patterns[1].search("https://a.test/index.php")
    dumped = json.loads(opts.model_dump_json())
    assert dumped["exclude_patterns"] == ["/admin", "\\.php$"]
    assert dumped["include_patterns"] == ["/docs/"]


def test_options_are_frozen():
    opts = CrawlOptions()
    with pytest.raises(ValidationError):
        opts.max_pages = 5  # type: ignore[misc]
    assert opts.model_copy(update={"max_pages": 5}).max_pages == 5
