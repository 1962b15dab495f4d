"""Tests for file system traversal functionality."""

import logging
from pathlib import Path

import pytest

from vuehealth.traversal import (
    DEFAULT_IGNORE_DIRS,
    find_source_files,
    is_component_file,
    is_script_file,
    is_source_file,
    should_ignore_directory,
)


class TestFileTypeChecks:
    """Test file type checking functions."""

    def test_is_component_file(self):
        assert is_component_file(Path("App.vue"))
        assert is_component_file(Path("src/components/List.VUE"))
        assert not is_component_file(Path("main.ts"))
        assert not is_component_file(Path("README.md"))

    def test_is_script_file(self):
        for name in ("main.js", "store.ts", "View.tsx", "Item.jsx", "config.mjs", "tool.cjs", "api.mts"):
            assert is_script_file(Path(name)), name
        assert not is_script_file(Path("App.vue"))
        assert not is_script_file(Path("style.css"))

    def test_minified_bundles_are_not_scripts(self):
        assert not is_script_file(Path("vendor.min.js"))
        assert not is_script_file(Path("chunk.min.mjs"))

    def test_is_source_file_without_scripts(self):
        """is_source_file() only accepts .vue when include_scripts=False."""
        assert is_source_file(Path("App.vue"), include_scripts=False)
        assert not is_source_file(Path("main.ts"), include_scripts=False)

    def test_is_source_file_with_scripts(self):
        assert is_source_file(Path("App.vue"))
        assert is_source_file(Path("main.ts"))
        assert not is_source_file(Path("index.html"))


class TestDirectoryFiltering:
    """Test directory ignore logic."""

    def test_should_ignore_directory_recognizes_ignored_dirs(self):
        ignore_set = {"dist", "node_modules"}
        assert should_ignore_directory(Path("dist"), ignore_set)
        assert should_ignore_directory(Path("node_modules"), ignore_set)
        assert not should_ignore_directory(Path("src"), ignore_set)

    def test_dist_variants_always_ignored(self):
        assert should_ignore_directory(Path("dist-ssr"), set())

    def test_should_ignore_directory_case_sensitive(self):
        assert not should_ignore_directory(Path("Dist"), {"dist"})

    def test_default_ignore_dirs_includes_common_patterns(self):
        for name in ("node_modules", "dist", ".nuxt", ".git", "coverage"):
            assert name in DEFAULT_IGNORE_DIRS


class TestTraversal:
    """Test file traversal functions."""

    @pytest.fixture
    def temp_project(self, tmp_path):
        """
        tmp_path/
          src/App.vue, src/main.ts, src/components/Card.vue, src/legacy.min.js
          node_modules/lib/index.js (ignored)
          dist/assets/app.js (ignored)
          README.md
        """
        (tmp_path / "src" / "components").mkdir(parents=True)
        (tmp_path / "node_modules" / "lib").mkdir(parents=True)
        (tmp_path / "dist" / "assets").mkdir(parents=True)

        (tmp_path / "src" / "App.vue").write_text("<template><Card /></template>")
        (tmp_path / "src" / "main.ts").write_text("createApp(App).mount('#app')")
        (tmp_path / "src" / "components" / "Card.vue").write_text("<template><div /></template>")
        (tmp_path / "src" / "legacy.min.js").write_text("var a=1")
        (tmp_path / "node_modules" / "lib" / "index.js").write_text("module.exports = {}")
        (tmp_path / "dist" / "assets" / "app.js").write_text("// bundle")
        (tmp_path / "README.md").write_text("# Project")
        return tmp_path

    def test_find_source_files(self, temp_project):
        names = [f.name for f in find_source_files(temp_project)]
        assert sorted(names) == ["App.vue", "Card.vue", "main.ts"]

    def test_components_only(self, temp_project):
        names = {f.name for f in find_source_files(temp_project, include_scripts=False)}
        assert names == {"App.vue", "Card.vue"}

    def test_custom_ignore_dirs(self, temp_project):
        names = {f.name for f in find_source_files(temp_project, ignore_dirs={"dist"})}
        assert "index.js" in names
        assert "app.js" not in names

    def test_filter_function(self, temp_project):
        files = find_source_files(temp_project, filter_fn=lambda p: p.suffix == ".vue")
        assert {f.name for f in files} == {"App.vue", "Card.vue"}

    def test_returns_sorted_results(self, temp_project):
        files = find_source_files(temp_project)
        assert files == sorted(files)

    def test_nonexistent_directory(self):
        with pytest.raises(FileNotFoundError):
            find_source_files(Path("/nonexistent/directory"))

    def test_file_not_directory(self, tmp_path):
        file_path = tmp_path / "App.vue"
        file_path.write_text("<template />")
        with pytest.raises(NotADirectoryError):
            find_source_files(file_path)

    def test_logs_progress(self, temp_project, caplog):
        with caplog.at_level(logging.INFO):
            find_source_files(temp_project)
        assert "Starting traversal" in caplog.text
        assert "Traversal complete" in caplog.text
