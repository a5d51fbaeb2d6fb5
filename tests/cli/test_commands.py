"""Tests for the dbd commands."""

import asyncio
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from dbdiagram.cli.main import cli
from dbdiagram.cli.watch import watch_file
from dbdiagram.config.models import DiagramConfig

runner = CliRunner()

SOURCE = """\
Table users {
  id int [pk]
}

Table posts {
  id int [pk]
  user_id int [ref: > users.id]
}

Note todo {
  'check indexes'
}
"""


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    path = tmp_path / "shop.dbml"
    path.write_text(SOURCE, encoding="utf-8")
    return path


class TestParseCommand:
    """dbd parse tests."""

    def test_given_schema_when_parsed_as_json_then_model_printed(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        # When
        args = ["--config-root", str(tmp_path), "parse", str(schema_file), "--json"]
        result = runner.invoke(cli, args)

        # Then
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [t["name"] for t in data["tables"]] == ["users", "posts"]
        assert len(data["relationships"]) == 1
        assert [n["name"] for n in data["notes"]] == ["todo"]

    def test_given_schema_when_parsed_then_summary_succeeds(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        result = runner.invoke(cli, ["--config-root", str(tmp_path), "parse", str(schema_file)])

        assert result.exit_code == 0, result.output

    def test_given_unknown_suffix_when_parsed_then_error(self, tmp_path: Path) -> None:
        path = tmp_path / "schema.xyz"
        path.write_text(SOURCE, encoding="utf-8")

        result = runner.invoke(cli, ["--config-root", str(tmp_path), "parse", str(path)])

        assert result.exit_code == 1
        assert "Unsupported format: xyz" in result.output


class TestRenderCommand:
    """dbd render tests."""

    def test_given_schema_when_rendered_then_svg_beside_source(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        # When
        result = runner.invoke(cli, ["--config-root", str(tmp_path), "render", str(schema_file)])

        # Then
        assert result.exit_code == 0, result.output
        svg = (tmp_path / "shop.svg").read_text(encoding="utf-8")
        assert 'id="table-users"' in svg
        assert 'class="connection"' in svg

    def test_given_output_and_theme_when_rendered_then_written_there(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        target = tmp_path / "out" / "diagram.svg"
        target.parent.mkdir()

        result = runner.invoke(
            cli,
            [
                "--config-root",
                str(tmp_path),
                "render",
                str(schema_file),
                "-o",
                str(target),
                "--theme",
                "dark",
                "--line-style",
                "rectilinear",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "#1e1f22" in target.read_text(encoding="utf-8")

    def test_given_bad_line_style_when_rendered_then_usage_error(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        result = runner.invoke(
            cli,
            ["--config-root", str(tmp_path), "render", str(schema_file), "--line-style", "zigzag"],
        )

        assert result.exit_code == 2
        assert "zigzag" in result.output


class TestRoutesCommand:
    """dbd routes tests."""

    def test_given_schema_when_routed_then_paths_as_json(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        result = runner.invoke(
            cli,
            ["--config-root", str(tmp_path), "routes", str(schema_file), "--line-style", "Oblique"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["error"] is None
        assert data["display"]["line_style"] == "Oblique"
        assert [p["key"] for p in data["paths"]] == ["rel-0-0"]


class TestPatchCommands:
    """dbd patch tests."""

    def test_given_table_when_patched_then_settings_written(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        # When
        result = runner.invoke(
            cli,
            [
                "--config-root",
                str(tmp_path),
                "patch",
                "table",
                str(schema_file),
                "users",
                "--x",
                "120",
                "--y",
                "80",
            ],
        )

        # Then
        assert result.exit_code == 0, result.output
        text = schema_file.read_text(encoding="utf-8")
        assert text.startswith("Table users [x: 120, y: 80] {\n")

    def test_given_note_when_patched_then_geometry_written(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        args = ["note", str(schema_file), "todo", "--x", "5", "--y", "6"]
        args += ["--width", "240", "--height", "120"]

        result = runner.invoke(cli, ["--config-root", str(tmp_path), "patch", *args])

        assert result.exit_code == 0, result.output
        text = schema_file.read_text(encoding="utf-8")
        assert "Note todo [x: 5, y: 6, width: 240, height: 120] {" in text

    def test_given_project_values_when_patched_then_block_created(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        result = runner.invoke(
            cli,
            [
                "--config-root",
                str(tmp_path),
                "patch",
                "project",
                str(schema_file),
                "zoom=1.5",
                "showGrid=false",
                "--name",
                "shop",
            ],
        )

        assert result.exit_code == 0, result.output
        text = schema_file.read_text(encoding="utf-8")
        assert text.startswith('Project "shop" {\n  zoom: 1.5\n  showGrid: false\n}\n\n')

    def test_given_bad_assignment_when_patched_then_usage_error(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        result = runner.invoke(
            cli,
            ["--config-root", str(tmp_path), "patch", "project", str(schema_file), "zoom"],
        )

        assert result.exit_code == 2
        assert schema_file.read_text(encoding="utf-8") == SOURCE

    def test_given_missing_table_when_patched_then_dropped(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        result = runner.invoke(
            cli,
            [
                "--config-root",
                str(tmp_path),
                "patch",
                "table",
                str(schema_file),
                "ghosts",
                "--x",
                "1",
                "--y",
                "2",
            ],
        )

        assert result.exit_code == 1
        assert "Edit dropped" in result.output
        assert schema_file.read_text(encoding="utf-8") == SOURCE


class TestCliGroup:
    """Root group tests."""

    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_given_invalid_config_when_invoked_then_error(
        self, tmp_path: Path, schema_file: Path
    ) -> None:
        config_dir = tmp_path / ".dbdiagram"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("display:\n  grid_size: 1\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config-root", str(tmp_path), "parse", str(schema_file)])

        assert result.exit_code == 1


class TestWatch:
    """watch_file tests."""

    @pytest.mark.asyncio
    async def test_given_stop_event_set_when_watching_then_single_render(
        self, schema_file: Path, tmp_path: Path
    ) -> None:
        # Given
        output = tmp_path / "live.svg"
        stop = asyncio.Event()
        stop.set()

        # When
        renders = await watch_file(schema_file, output, DiagramConfig(), stop_event=stop)

        # Then
        assert renders == 1
        assert 'id="table-posts"' in output.read_text(encoding="utf-8")
