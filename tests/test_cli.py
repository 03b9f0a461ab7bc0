"""Tests for the wearly command line."""

from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from wearly.cli import cli


class TestSecretCommand:
    def test_prints_key(self):
        result = CliRunner().invoke(cli, ["secret", "--format", "hex", "--length", "16"])

        assert result.exit_code == 0
        key = result.output.strip()
        assert len(key) == 32
        int(key, 16)

    def test_write_appends_to_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("DEBUG=true")

        result = CliRunner().invoke(cli, ["secret", "--write", str(env_file)])

        assert result.exit_code == 0
        lines = env_file.read_text().splitlines()
        assert lines[0] == "DEBUG=true"
        assert lines[1].startswith("SECRET_KEY=")

    def test_write_replaces_existing_key(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("SECRET_KEY=old\nDEBUG=true\n")

        result = CliRunner().invoke(cli, ["secret", "--write", str(env_file)])

        assert result.exit_code == 0
        content = env_file.read_text()
        assert "SECRET_KEY=old" not in content
        assert content.count("SECRET_KEY=") == 1
        assert "DEBUG=true" in content


class TestDbCommand:
    def test_without_args_prints_help(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(cli, ["db"])

        assert result.exit_code == 0
        assert "wearly db upgrade head" in result.output


class TestRecountCommand:
    def test_reports_corrections(self, tmp_path):
        fixed = {"users.followers_count": 2, "outfits.likes_count": 0}
        with patch("wearly.db.services.counters.recount_all", AsyncMock(return_value=fixed)):
            result = CliRunner().invoke(
                cli, ["recount", "--url", f"sqlite+aiosqlite:///{tmp_path / 'c.db'}"]
            )

        assert result.exit_code == 0
        assert "users.followers_count: 2 corrected" in result.output
        assert "outfits.likes_count" not in result.output
        assert "2 counter(s) corrected" in result.output
