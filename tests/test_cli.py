"""CLI smoke tests using typer's CliRunner."""

import json

from typer.testing import CliRunner

from bemorder.cli.app import app

runner = CliRunner()


def _bundle(tmp_path, text):
    path = tmp_path / "deps.yaml"
    path.write_text(text)
    return path


CHAIN = (
    "block:\n"
    "  mustDeps:\n"
    "    - block: mixins\n"
    "    - block: variables\n"
    "mixins:\n"
    "  mustDeps:\n"
    "    - block: variables\n"
)

CYCLE = (
    "a:\n"
    "  mustDeps:\n"
    "    - block: b\n"
    "b:\n"
    "  mustDeps:\n"
    "    - block: a\n"
)


class TestVersionFlag:
    """Test the --version flag."""

    def test_version_output(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "bemorder" in result.output


class TestOrderCommand:
    """Tests for the order command."""

    def test_order_human(self, tmp_path):
        deps = _bundle(tmp_path, CHAIN)
        result = runner.invoke(
            app, ["order", "block.css", "mixins.css", "variables.css", "-d", str(deps)]
        )

        assert result.exit_code == 0
        assert result.output.split() == ["variables.css", "mixins.css", "block.css"]

    def test_order_json(self, tmp_path):
        deps = _bundle(tmp_path, CHAIN)
        result = runner.invoke(
            app,
            ["--json", "order", "block.css", "mixins.css", "variables.css", "--deps", str(deps)],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["status"] == "success"
        assert data["order"] == ["variables.css", "mixins.css", "block.css"]
        assert data["exit_code"] == 0

    def test_order_weight_strategy(self):
        result = runner.invoke(
            app, ["--json", "order", "z.css", "a__e.css", "a.css", "--strategy", "weight"]
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["order"] == ["a.css", "z.css", "a__e.css"]

    def test_order_cycle(self, tmp_path):
        deps = _bundle(tmp_path, CYCLE)
        result = runner.invoke(app, ["--json", "order", "a.css", "b.css", "-d", str(deps)])

        assert result.exit_code == 4
        data = json.loads(result.stdout)
        assert data["status"] == "error"
        cycle = data["errors"][0]["cycle"]
        assert set(cycle) == {"a", "b"}
        assert cycle[0] == cycle[-1]

    def test_order_cycle_human(self, tmp_path):
        deps = _bundle(tmp_path, CYCLE)
        result = runner.invoke(app, ["order", "a.css", "b.css", "-d", str(deps)])

        assert result.exit_code == 4
        assert "Circular dependency" in result.output

    def test_order_invalid_naming(self):
        result = runner.invoke(app, ["--json", "order", "good.css", "bad__.css"])

        assert result.exit_code == 2
        assert json.loads(result.stdout)["errors"][0]["stem"] == "bad__"

    def test_order_invalid_declaration_file(self, tmp_path):
        deps = tmp_path / "broken.deps.yaml"
        deps.write_text("mustDeps: [unclosed\n")
        result = runner.invoke(app, ["--json", "order", "a.css", "-d", str(deps)])

        assert result.exit_code == 3
        assert json.loads(result.stdout)["errors"][0]["path"] == str(deps)

    def test_order_undecodable_declaration_file(self, tmp_path):
        deps = tmp_path / "a.deps.yaml"
        deps.write_bytes(b"\xff\xfe")
        result = runner.invoke(app, ["--json", "order", "a.css", "-d", str(deps)])

        assert result.exit_code == 3
        assert json.loads(result.stdout)["errors"][0]["path"] == str(deps)

    def test_order_warns_about_skipped_declaration_files(self, tmp_path):
        legacy = tmp_path / "block.deps.js"
        legacy.write_text("({mustDeps: [{block: 'a'}]})")
        result = runner.invoke(app, ["--json", "order", "block.css", "-d", str(legacy)])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["order"] == ["block.css"]
        assert "not a YAML or JSON file" in data["warnings"][0]["message"]

    def test_order_artifact_paths_need_not_exist(self, tmp_path):
        result = runner.invoke(
            app, ["--json", "order", str(tmp_path / "missing" / "x__y.css"), "x.css"]
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["order"][0] == "x.css"

    def test_order_unknown_strategy(self):
        result = runner.invoke(app, ["order", "a.css", "--strategy", "random"])

        assert result.exit_code == 1
        assert "Unknown strategy" in result.output

    def test_order_requires_files(self):
        result = runner.invoke(app, ["order"])
        assert result.exit_code != 0


class TestGraphCommand:
    """Tests for the graph command."""

    def test_graph_json(self, tmp_path):
        deps = _bundle(tmp_path, "page:\n  mustDeps:\n    - block: button\n      elems: [icon]\n")
        result = runner.invoke(app, ["--json", "graph", "page.css", "--deps", str(deps)])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["graph"] == {
            "page": ["button__icon"],
            "button__icon": ["button"],
            "button": [],
        }
        assert data["node_count"] == 3
        kinds = {row["Stem"]: row["Kind"] for row in data["nodes"]}
        assert kinds == {"page": "artifact", "button__icon": "virtual", "button": "virtual"}

    def test_graph_human(self, tmp_path):
        result = runner.invoke(app, ["graph", "x__y.css", "x.css"])

        assert result.exit_code == 0
        assert "Dependency Graph" in result.output
        assert "2 node(s)" in result.output

    def test_graph_warns_about_skipped_declaration_files(self, tmp_path):
        legacy = tmp_path / "block.deps.js"
        legacy.write_text("")
        result = runner.invoke(app, ["--json", "graph", "block.css", "--deps", str(legacy)])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["node_count"] == 1
        assert "not a YAML or JSON file" in data["warnings"][0]["message"]

    def test_graph_invalid_naming(self, tmp_path):
        deps = _bundle(tmp_path, "a:\n  mustDeps:\n    - block: b___c\n")
        result = runner.invoke(app, ["--json", "graph", "--deps", str(deps)])

        assert result.exit_code == 2


class TestConfigCommand:
    """Tests for the config command."""

    def test_config_show(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "Ordering" in result.output
        assert "Sources" in result.output

    def test_config_set_and_reset(self, isolated_config):
        result = runner.invoke(app, ["config", "set", "ordering.strategy", "weight"])
        assert result.exit_code == 0
        assert json.loads(isolated_config.read_text())["ordering"]["strategy"] == "weight"

        result = runner.invoke(app, ["config", "reset"])
        assert result.exit_code == 0
        assert not isolated_config.exists()

    def test_config_set_suffixes(self, isolated_config):
        result = runner.invoke(
            app, ["config", "set", "sources.deps_suffixes", ".deps.yaml,.deps.json"]
        )
        assert result.exit_code == 0
        saved = json.loads(isolated_config.read_text())
        assert saved["sources"]["deps_suffixes"] == [".deps.yaml", ".deps.json"]

    def test_config_set_invalid_key(self):
        result = runner.invoke(app, ["config", "set", "invalid.key", "value"])
        assert result.exit_code == 1
        assert "Unknown key" in result.output

    def test_config_set_invalid_strategy(self):
        result = runner.invoke(app, ["config", "set", "ordering.strategy", "random"])
        assert result.exit_code == 1
        assert "Invalid strategy" in result.output

    def test_config_set_missing_args(self):
        result = runner.invoke(app, ["config", "set"])
        assert result.exit_code == 1

    def test_config_unknown_action(self):
        result = runner.invoke(app, ["config", "unknown_action"])
        assert result.exit_code == 1
        assert "Unknown action" in result.output
