"""Tests for the metacenter command line."""
import json

import pytest

from yonk_code_metacenter.cli.commands import build_generate_params, run
from yonk_code_metacenter.config import CONFIG_ENV_VAR, MetaCenterConfig


@pytest.fixture(autouse=True)
def no_env_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


@pytest.fixture
def config_file(tmp_path, fixtures_dir):
    path = tmp_path / "metacenter.yaml"
    path.write_text(
        f"store:\n  path: {fixtures_dir / 'metadata.yaml'}\n"
        f"generation:\n  output_dir: {tmp_path / 'out'}\n",
        encoding="utf-8",
    )
    return path


class TestDdlCommand:
    def test_prints_table(self, fixtures_dir, capsys):
        run(["ddl", "--file", str(fixtures_dir / "task_info.sql")])

        table = json.loads(capsys.readouterr().out)
        assert table["name"] == "task_info"
        assert table["fields"][1]["enum"]["values"][0]["literal"] == "1"
        assert "fields_by_name" not in table

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run(["ddl", "--file", str(tmp_path / "nope.sql")])

        assert exc_info.value.code == 1
        assert "DDL file not found" in capsys.readouterr().err

    def test_malformed(self, tmp_path, capsys):
        path = tmp_path / "bad.sql"
        path.write_text("SELECT 1", encoding="utf-8")

        with pytest.raises(SystemExit):
            run(["ddl", "--file", str(path)])

        assert "CREATE TABLE" in capsys.readouterr().err


class TestEsTemplateCommand:
    def test_from_file(self, fixtures_dir, capsys):
        run(["es-template", "--file", str(fixtures_dir / "task_info.sql")])

        doc = json.loads(capsys.readouterr().out)
        assert doc["template"]["mappings"]["properties"]["payload"] == {"type": "nested"}

    def test_from_store(self, config_file, capsys):
        run(["--config", str(config_file), "es-template", "--table", "task_info"])

        assert json.loads(capsys.readouterr().out)["index_patterns"] == ["task_info*"]

    def test_unknown_table(self, config_file, capsys):
        with pytest.raises(SystemExit):
            run(["--config", str(config_file), "es-template", "--table", "nope"])

        assert "Table not found" in capsys.readouterr().err


class TestGenerateCommand:
    def test_all_tables(self, config_file, tmp_path, capsys):
        run(["--config", str(config_file), "generate", "--all"])

        out = tmp_path / "out"
        assert (out / "taskinfo1" / "constants.py").exists()
        assert (out / "user2" / "model.py").exists()
        assert "Generated 4 files for 2 tables" in capsys.readouterr().out

    def test_single_artifact_from_file(self, fixtures_dir, tmp_path):
        run([
            "generate", "--file", str(fixtures_dir / "task_info.sql"),
            "--output-dir", str(tmp_path), "--artifact", "constants",
        ])

        assert (tmp_path / "taskinfo0" / "constants.py").exists()
        assert not (tmp_path / "taskinfo0" / "model.py").exists()


class TestBuildGenerateParams:
    def test_defaults(self):
        params = build_generate_params(MetaCenterConfig())

        assert [p.name for p in params] == ["constants", "model"]
        assert all(p.template_path is None for p in params)
        assert params[0].output_dir == "./default"

    def test_templates_dir_override(self, tmp_path):
        (tmp_path / "model.py.j2").write_text("{{ table.name }}", encoding="utf-8")
        config = MetaCenterConfig.model_validate({"generation": {"templates_dir": str(tmp_path)}})

        params = build_generate_params(config, output_dir="gen/")

        assert params[0].template_path is None
        assert params[1].template_path == tmp_path / "model.py.j2"
        assert params[1].output_dir == "gen"
