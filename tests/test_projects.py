"""Tests for boundgraph.projects — file ownership and import classification."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from boundgraph.projects import (
    MappingImportResolver,
    find_project_using_file,
    find_project_using_import,
    find_source_project,
    find_target_project,
    get_source_file_path,
    is_absolute_import_into_another_project,
    is_relative,
    is_relative_import_into_another_project,
    normalize_path,
    remove_ext,
    resolve_relative_import,
)

if TYPE_CHECKING:
    from pathlib import Path

    from boundgraph.graph.model import ProjectGraph


class TestPathHelpers:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("libs/ui/src/index.ts", "libs/ui/src/index"),
            ("libs/ui/src/button.spec.tsx", "libs/ui/src/button.spec"),
            ("libs/ui/src/index", "libs/ui/src/index"),
            ("libs/ui.v2/src/readme", "libs/ui.v2/src/readme"),
        ],
    )
    def test_remove_ext(self, path: str, expected: str) -> None:
        assert remove_ext(path) == expected

    def test_normalize_path_drops_drive_letter(self) -> None:
        assert normalize_path("C:" + os.sep + "work" + os.sep + "libs") == "/work/libs"

    def test_normalize_path_keeps_forward_slashes(self) -> None:
        assert normalize_path("libs/ui/src") == "libs/ui/src"

    def test_is_relative(self) -> None:
        assert is_relative("./button")
        assert is_relative("../../ui")
        assert not is_relative("@acme/ui")
        assert not is_relative("libs/ui")

    def test_get_source_file_path(self, tmp_path: Path) -> None:
        source = tmp_path / "libs" / "ui" / "src" / "index.ts"
        assert get_source_file_path(str(source), str(tmp_path)) == "libs/ui/src/index.ts"

    def test_resolve_relative_import(self, tmp_path: Path) -> None:
        resolved = resolve_relative_import(
            "../../ui/src/button", str(tmp_path), "libs/feature-cart/src/index.ts"
        )
        assert resolved == "libs/ui/src/button"


class TestFindProject:
    def test_exact_extensionless_match(self, workspace_graph: ProjectGraph) -> None:
        project = find_project_using_file(workspace_graph, "libs/ui/src/button")
        assert project is not None
        assert project.name == "ui"

    def test_no_owner(self, workspace_graph: ProjectGraph) -> None:
        assert find_project_using_file(workspace_graph, "tools/scripts/build") is None

    def test_path_with_extension_is_not_matched_directly(
        self, workspace_graph: ProjectGraph
    ) -> None:
        assert find_project_using_file(workspace_graph, "libs/ui/src/button.tsx") is None

    def test_find_source_project_strips_extension(self, workspace_graph: ProjectGraph) -> None:
        project = find_source_project(workspace_graph, "libs/feature-cart/src/lib/cart.ts")
        assert project is not None
        assert project.name == "feature-cart"

    def test_target_exact(self, workspace_graph: ProjectGraph) -> None:
        project = find_target_project(workspace_graph, "libs/ui/src/button")
        assert project is not None
        assert project.name == "ui"

    def test_target_directory_index(self, workspace_graph: ProjectGraph) -> None:
        project = find_target_project(workspace_graph, "libs/util")
        assert project is not None
        assert project.name == "util"

    def test_target_directory_src_index(self, workspace_graph: ProjectGraph) -> None:
        project = find_target_project(workspace_graph, "libs/data")
        assert project is not None
        assert project.name == "data"

    def test_target_missing(self, workspace_graph: ProjectGraph) -> None:
        assert find_target_project(workspace_graph, "libs/nowhere") is None


class TestRelativeImportIntoAnotherProject:
    def test_crossing_project(self, workspace_graph: ProjectGraph, tmp_path: Path) -> None:
        assert is_relative_import_into_another_project(
            "../../ui/src/button",
            str(tmp_path),
            workspace_graph,
            "libs/feature-cart/src/index.ts",
        )

    def test_crossing_into_directory_module(
        self, workspace_graph: ProjectGraph, tmp_path: Path
    ) -> None:
        assert is_relative_import_into_another_project(
            "../../data", str(tmp_path), workspace_graph, "libs/feature-cart/src/index.ts"
        )

    def test_within_same_project(self, workspace_graph: ProjectGraph, tmp_path: Path) -> None:
        assert not is_relative_import_into_another_project(
            "./lib/cart", str(tmp_path), workspace_graph, "libs/feature-cart/src/index.ts"
        )

    def test_unknown_target(self, workspace_graph: ProjectGraph, tmp_path: Path) -> None:
        assert not is_relative_import_into_another_project(
            "../../../tools/x", str(tmp_path), workspace_graph, "libs/feature-cart/src/index.ts"
        )

    def test_unknown_source(self, workspace_graph: ProjectGraph, tmp_path: Path) -> None:
        assert not is_relative_import_into_another_project(
            "../libs/ui/src/button", str(tmp_path), workspace_graph, "tools/gen.ts"
        )

    def test_non_relative(self, workspace_graph: ProjectGraph, tmp_path: Path) -> None:
        assert not is_relative_import_into_another_project(
            "@acme/ui", str(tmp_path), workspace_graph, "libs/feature-cart/src/index.ts"
        )


class TestAbsoluteImportIntoAnotherProject:
    @pytest.mark.parametrize("specifier", ["libs/ui", "/libs/ui", "apps/shop/main", "/apps/x"])
    def test_cross_project(self, specifier: str) -> None:
        assert is_absolute_import_into_another_project(specifier)

    @pytest.mark.parametrize("specifier", ["@acme/ui", "./libs/ui", "mylibs/ui", "libs"])
    def test_not_cross_project(self, specifier: str) -> None:
        assert not is_absolute_import_into_another_project(specifier)


class TestImportResolver:
    def test_longest_prefix_wins(self) -> None:
        resolver = MappingImportResolver({"@acme/ui": "ui", "@acme/ui/forms": "ui-forms"})
        assert resolver.find_project_with_import("@acme/ui/forms/input", "f.ts", "") == "ui-forms"
        assert resolver.find_project_with_import("@acme/ui", "f.ts", "") == "ui"
        assert resolver.find_project_with_import("@acme/ui/button", "f.ts", "") == "ui"

    def test_prefix_must_end_at_segment(self) -> None:
        resolver = MappingImportResolver({"@acme/ui": "ui"})
        assert resolver.find_project_with_import("@acme/uikit", "f.ts", "") is None

    def test_scope_fallback(self) -> None:
        resolver = MappingImportResolver({})
        assert resolver.find_project_with_import("@acme/data/models", "f.ts", "acme") == "data"
        assert resolver.find_project_with_import("@other/data", "f.ts", "acme") is None

    def test_find_project_using_import(self, workspace_graph: ProjectGraph) -> None:
        resolver = MappingImportResolver({"@acme/util": "util", "@acme/gone": "removed"})
        project = find_project_using_import(
            workspace_graph, resolver, "libs/ui/src/index.ts", "@acme/util", "acme"
        )
        assert project is not None
        assert project.name == "util"
        assert (
            find_project_using_import(
                workspace_graph, resolver, "libs/ui/src/index.ts", "@acme/gone", "acme"
            )
            is None
        )
        assert (
            find_project_using_import(workspace_graph, resolver, "libs/ui/src/index.ts", "react")
            is None
        )
