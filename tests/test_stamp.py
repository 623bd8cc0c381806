"""Tests for the stamping pass."""

from pathlib import Path

from hypothesis import given, settings
from hypothesis import strategies as st

from puntada import parse
from puntada.config import EngineConfig, engine_config_context
from puntada.nodes import Element
from puntada.stamp import StampStatus, stamp
from puntada.visitor import walk

APP = "export function App() {\n  return (\n    <p>Hello</p>\n  );\n}\n"


def _ids(code: str, attribute: str = "data-edit-id") -> list[str | None]:
    return [
        element.get_attribute(attribute).value  # type: ignore[union-attr]
        for element in walk(parse(code))
        if isinstance(element, Element) and element.has_attribute(attribute)
    ]


class TestStamping:
    def test_scenario_single_element(self, project: Path) -> None:
        result = stamp(project / "a.tsx", APP, project_root=project)
        assert result.status is StampStatus.TRANSFORMED
        assert result.changed
        assert result.stamped == 1
        assert '<p data-edit-id="a.tsx:3:5">Hello</p>' in result.code
        assert result.code.replace(' data-edit-id="a.tsx:3:5"', "") == APP

    def test_nested_path_uses_forward_slashes(self, project: Path) -> None:
        result = stamp(project / "src" / "ui" / "App.jsx", "x = <p>Hi</p>", project_root=project)
        assert _ids(result.code) == ["src/ui/App.jsx:1:5"]

    def test_every_element_including_nested_and_self_closing(self, project: Path) -> None:
        source = "x = <ul>{items.map(i => <li>{i}</li>)}<br /></ul>"
        result = stamp(project / "a.tsx", source, project_root=project)
        assert result.stamped == 3
        assert (
            result.code
            == 'x = <ul data-edit-id="a.tsx:1:5">{items.map(i => <li data-edit-id="a.tsx:1:25">{i}</li>)}'
            '<br data-edit-id="a.tsx:1:39" /></ul>'
        )

    def test_two_elements_on_one_line_get_distinct_ids(self, project: Path) -> None:
        source = "x = (\n    <div><span>One</span><span>Two</span></div>\n)"
        result = stamp(project / "a.tsx", source, project_root=project)
        assert _ids(result.code) == ["a.tsx:2:5", "a.tsx:2:10", "a.tsx:2:26"]

    def test_inserted_after_last_attribute(self, project: Path) -> None:
        source = 'x = <a href="/" {...rest}>Home</a>'
        result = stamp(project / "a.tsx", source, project_root=project)
        assert result.code == 'x = <a href="/" {...rest} data-edit-id="a.tsx:1:5">Home</a>'

    def test_generic_function_types_are_left_alone(self, project: Path) -> None:
        source = (
            "type Fn = <T>(x: T) => T;\n"
            "const id: <T>(x: T) => T = (x) => x;\n"
            "const b = <p>x</p>;\n"
        )
        result = stamp(project / "a.tsx", source, project_root=project)
        assert result.stamped == 1
        assert result.code == source.replace("<p>", '<p data-edit-id="a.tsx:3:11">')

    def test_fragments_are_not_stamped(self, project: Path) -> None:
        result = stamp(project / "a.tsx", "x = <><b>1</b></>", project_root=project)
        assert result.code == 'x = <><b data-edit-id="a.tsx:1:7">1</b></>'

    def test_astral_characters_count_two_columns(self, project: Path) -> None:
        result = stamp(project / "a.tsx", 'x = "🚩" || <b>x</b>', project_root=project)
        assert _ids(result.code) == ["a.tsx:1:13"]

    def test_custom_attribute_name(self, project: Path) -> None:
        config = EngineConfig(project_root=project, attribute_name="data-loc")
        result = stamp(project / "a.tsx", "x = <p>Hi</p>", config=config)
        assert result.code == 'x = <p data-loc="a.tsx:1:5">Hi</p>'

    def test_uses_context_config(self, project: Path) -> None:
        with engine_config_context(EngineConfig(project_root=project)):
            result = stamp(project / "a.tsx", "x = <p>Hi</p>")
        assert result.status is StampStatus.TRANSFORMED


class TestIdempotence:
    def test_stamped_output_is_unchanged(self, project: Path) -> None:
        first = stamp(project / "a.tsx", APP, project_root=project)
        second = stamp(project / "a.tsx", first.code, project_root=project)
        assert second.status is StampStatus.UNCHANGED
        assert second.code == first.code
        assert second.map is None

    def test_existing_attribute_is_never_duplicated(self, project: Path) -> None:
        source = 'x = <p data-edit-id="keep">Hi</p>'
        result = stamp(project / "a.tsx", source, project_root=project)
        assert result.status is StampStatus.UNCHANGED
        assert result.code == source

    @given(
        body=st.lists(
            st.sampled_from(["<p>Hi</p>", "<div>", "</div>", "{x}", "<br/>", "\n", " text "]),
            max_size=12,
        ).map("".join)
    )
    @settings(max_examples=100)
    def test_stamping_twice_is_stable(self, body: str) -> None:
        root = Path("/srv/app")
        source = f"x = <main>{body}</main>"
        first = stamp(root / "a.tsx", source, project_root=root)
        second = stamp(root / "a.tsx", first.code, project_root=root)
        assert second.status is StampStatus.UNCHANGED
        assert second.code == first.code


class TestUnchangedAndSkipped:
    def test_no_markup_is_unchanged(self, project: Path) -> None:
        source = "export const x = 1 < 2;\n"
        result = stamp(project / "a.tsx", source, project_root=project)
        assert result.status is StampStatus.UNCHANGED
        assert result.code == source
        assert result.map is None
        assert result.stamped == 0

    def test_non_markup_extension_is_skipped(self, project: Path) -> None:
        result = stamp(project / "main.ts", "x = <p>Hi</p>", project_root=project)
        assert result.status is StampStatus.SKIPPED
        assert result.code == "x = <p>Hi</p>"
        assert result.reason

    def test_outside_root_is_skipped(self, project: Path, tmp_path: Path) -> None:
        result = stamp(tmp_path / "elsewhere.tsx", "x = <p>Hi</p>", project_root=project)
        assert result.status is StampStatus.SKIPPED

    def test_node_modules_is_skipped(self, project: Path) -> None:
        path = project / "node_modules" / "lib" / "index.jsx"
        result = stamp(path, "x = <p>Hi</p>", project_root=project)
        assert result.status is StampStatus.SKIPPED

    def test_virtual_module_id_is_skipped(self, project: Path) -> None:
        result = stamp("\0virtual:a.tsx", "x = <p>Hi</p>", project_root=project)
        assert result.status is StampStatus.SKIPPED
        assert result.code == "x = <p>Hi</p>"
        assert "NUL" in (result.reason or "")

    def test_deep_nesting_is_skipped_not_raised(self, project: Path) -> None:
        source = "x = " + "<div>" * 1200 + "hi" + "</div>" * 1200
        result = stamp(project / "a.tsx", source, project_root=project)
        assert result.status is StampStatus.SKIPPED
        assert result.code == source
        assert "nested too deeply" in (result.reason or "")

    def test_moderate_nesting_is_stamped(self, project: Path) -> None:
        source = "x = " + "<div>" * 100 + "hi" + "</div>" * 100
        result = stamp(project / "a.tsx", source, project_root=project)
        assert result.status is StampStatus.TRANSFORMED
        assert result.stamped == 100

    def test_strict_parse_error_is_skipped_not_raised(self, project: Path) -> None:
        config = EngineConfig(project_root=project, strict=True)
        result = stamp(project / "a.tsx", "x = <div><p>Hi</div>", config=config)
        assert result.status is StampStatus.SKIPPED
        assert "Unclosed element" in (result.reason or "")


class TestPartialFiles:
    def test_valid_elements_are_stamped_despite_errors(self, project: Path) -> None:
        source = "x = <div><p>Hi</div>;\ny = <em>ok</em>"
        result = stamp(project / "a.tsx", source, project_root=project)
        assert result.status is StampStatus.TRANSFORMED
        assert result.diagnostics > 0
        assert _ids(result.code) == ["a.tsx:1:5", "a.tsx:1:10", "a.tsx:2:5"]

    def test_unterminated_tag_is_not_stamped(self, project: Path) -> None:
        source = 'x = <em>ok</em>; y = <div className="a"'
        result = stamp(project / "a.tsx", source, project_root=project)
        assert result.stamped == 1
        assert result.code.endswith('<div className="a"')


class TestSourceMap:
    def test_map_shape(self, project: Path) -> None:
        result = stamp(project / "src" / "a.tsx", APP, project_root=project)
        assert result.map is not None
        assert result.map["version"] == 3
        assert result.map["file"] == "src/a.tsx"
        assert result.map["sources"] == ["src/a.tsx"]
        assert result.map["sourcesContent"] == [APP]
        assert result.map["names"] == []
        assert result.map["mappings"].count(";") >= APP.count("\n") - 1
        assert result.map["mappings"].startswith("AAAA")
