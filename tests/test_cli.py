# tests/test_cli.py
"""End-to-end tests for the barsmith command line."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from barsmith.cli.interface import main_cli
from barsmith.cli.options import expand_greedy_option


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def runner():
    return CliRunner()


class TestRenderCommand:
    """Tests for the load -> render -> output flow."""

    def test_hello_world_to_stdout(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "hello.hbs").write_text("Hello {{name}}")
            write_json(Path(td, "ctx.json"), {"name": "World"})

            result = runner.invoke(main_cli, ["-t", "hello.hbs", "-c", "ctx.json"], catch_exceptions=False)

            assert result.exit_code == 0
            assert result.output == "Hello World\n"
            assert sorted(p.name for p in Path(td).iterdir()) == ["ctx.json", "hello.hbs"]

    def test_output_file_written_verbatim(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "hello.hbs").write_text("Hello {{name}}")
            write_json(Path(td, "ctx.json"), {"name": "World"})

            result = runner.invoke(main_cli, ["-t", "hello.hbs", "-c", "ctx.json", "-o", "out/hello.txt"],
                                   catch_exceptions=False)

            assert result.exit_code == 0
            assert result.output == ""
            assert Path(td, "out", "hello.txt").read_bytes() == b"Hello World"

    def test_greedy_context_list_merges_in_order(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "t.hbs").write_text("{{a}} {{b}}")
            write_json(Path(td, "one.json"), {"a": 1})
            write_json(Path(td, "two.json"), {"a": 2, "b": 3})

            result = runner.invoke(main_cli, ["-c", "one.json", "two.json", "-t", "t.hbs"], catch_exceptions=False)

            assert result.exit_code == 0
            assert result.output == "2 3\n"

    def test_repeated_context_flag(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "t.hbs").write_text("{{a}}")
            write_json(Path(td, "one.json"), {"a": 1})
            write_json(Path(td, "two.json"), {"a": 2})

            result = runner.invoke(main_cli, ["-c", "two.json", "--context", "one.json", "-t", "t.hbs"])

            assert result.output == "1\n"

    def test_directory_context_with_markdown(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "data").mkdir()
            Path(td, "data", "post.yaml").write_text("title: Post\nbody: '*hi*'\n")
            Path(td, "page.html").write_text("<h1>{{title}}</h1>{{{markdownToHtml body}}}")

            result = runner.invoke(main_cli, ["-t", "page.html", "-c", "data"], catch_exceptions=False)

            assert result.exit_code == 0
            assert result.output == "<h1>Post</h1><p><em>hi</em></p>\n"

    def test_user_vars_override_context(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "t.hbs").write_text("{{env}}/{{name}}")
            write_json(Path(td, "ctx.json"), {"env": "dev", "name": "app"})

            result = runner.invoke(main_cli, ["-t", "t.hbs", "-c", "ctx.json", "--var", "env=prod"])

            assert result.exit_code == 0
            assert result.output == "prod/app\n"

    def test_bad_user_var_is_usage_error(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "t.hbs").write_text("x")
            write_json(Path(td, "ctx.json"), {})

            result = runner.invoke(main_cli, ["-t", "t.hbs", "-c", "ctx.json", "--var", "novalue"])

            assert result.exit_code == 2


class TestRenderCommandErrors:
    """Fatal errors exit non-zero with a message and write nothing."""

    def test_missing_context_path(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "t.hbs").write_text("x")

            result = runner.invoke(main_cli, ["-t", "t.hbs", "-c", "missing.json", "-o", "out.txt"])

            assert result.exit_code == 1
            assert "does not exist" in result.output
            assert not Path(td, "out.txt").exists()

    def test_malformed_single_file_aborts(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "t.hbs").write_text("{{a}}")
            write_json(Path(td, "good.json"), {"a": 1})
            Path(td, "bad.yaml").write_text("- just\n- a list\n")

            result = runner.invoke(main_cli, ["-t", "t.hbs", "-c", "good.json", "bad.yaml", "-o", "out.txt"])

            assert result.exit_code == 1
            assert "Error:" in result.output
            assert not Path(td, "out.txt").exists()

    def test_missing_template(self, runner):
        with runner.isolated_filesystem() as td:
            write_json(Path(td, "ctx.json"), {})

            result = runner.invoke(main_cli, ["-t", "nope.hbs", "-c", "ctx.json"])

            assert result.exit_code == 1
            assert "Template file not found" in result.output

    def test_template_syntax_error(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "t.hbs").write_text("{{#if a}}")
            write_json(Path(td, "ctx.json"), {"a": 1})

            result = runner.invoke(main_cli, ["-t", "t.hbs", "-c", "ctx.json"])

            assert result.exit_code == 1
            assert "Failed to compile template" in result.output

    def test_unclosed_block_does_not_print_partial_output(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "t.hbs").write_text("Head {{name}} {{#if a}} tail")
            write_json(Path(td, "ctx.json"), {"name": "N", "a": 1})

            result = runner.invoke(main_cli, ["-t", "t.hbs", "-c", "ctx.json"])

            assert result.exit_code == 1
            assert "Head N" not in result.output
            assert "unclosed block or tag" in result.output

    def test_missing_required_inputs(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main_cli, [])

            assert result.exit_code == 1
            assert "no template given" in result.output


class TestConfigFileIntegration:
    """Options supplied through .barsmith.toml and profiles."""

    def test_project_config_supplies_inputs(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "t.hbs").write_text("{{greeting}}, {{who}}")
            write_json(Path(td, "ctx.json"), {"greeting": "Hi"})
            Path(td, ".barsmith.toml").write_text(
                'template = "t.hbs"\ncontext = ["ctx.json"]\n\n[vars]\nwho = "toml"\n'
            )

            result = runner.invoke(main_cli, [], catch_exceptions=False)

            assert result.exit_code == 0
            assert result.output == "Hi, toml\n"

    def test_profile_and_cli_precedence(self, runner):
        with runner.isolated_filesystem() as td:
            Path(td, "t.hbs").write_text("{{v}}")
            write_json(Path(td, "a.json"), {"v": "a"})
            write_json(Path(td, "b.json"), {"v": "b"})
            write_json(Path(td, "c.json"), {"v": "c"})
            Path(td, ".barsmith.toml").write_text(
                'template = "t.hbs"\ncontext = ["a.json"]\n\n[profiles.other]\ncontext = ["b.json"]\n'
            )

            from_profile = runner.invoke(main_cli, ["--config-profile", "other"])
            from_cli = runner.invoke(main_cli, ["--config-profile", "other", "-c", "c.json"])

            assert from_profile.output == "b\n"
            assert from_cli.output == "c\n"

    def test_save_profile(self, runner):
        with runner.isolated_filesystem() as td:
            result = runner.invoke(main_cli, ["-t", "t.hbs", "-c", "a.json", "b.json", "--save", "site"])

            assert result.exit_code == 0
            saved = Path(td, ".barsmith.toml").read_text()
            assert "[profiles.site]" in saved
            assert 'template = "t.hbs"' in saved


class TestExpandGreedyOption:
    """Tests for rewriting greedy -c/--context values."""

    @pytest.mark.parametrize("args,expected", [
        (["-c", "a", "b"], ["-c", "a", "-c", "b"]),
        (["--context", "a", "b", "-t", "t"], ["--context", "a", "--context", "b", "-t", "t"]),
        (["--context=a", "b"], ["--context=a", "--context", "b"]),
        (["-t", "t", "-o", "out"], ["-t", "t", "-o", "out"]),
        (["-c", "a", "-o", "out", "-c", "b", "c"], ["-c", "a", "-o", "out", "-c", "b", "-c", "c"]),
    ])
    def test_expansion(self, args, expected):
        assert expand_greedy_option(args, ("-c", "--context")) == expected
