"""End-to-end tests for the downscaler command.

FFmpeg is not required: tool lookup is patched and run_command is replaced
with a fake that writes the requested output file.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from downscaler.cli import main
from downscaler.exceptions import ToolNotFoundError


class FakeFfmpeg:
    """Records FFmpeg commands; fails for inputs named in fail_names."""

    def __init__(self, fail_names: set[str] | None = None) -> None:
        self.fail_names = fail_names or set()
        self.commands: list[list[str]] = []

    def __call__(self, cmd, **kwargs):
        self.commands.append(cmd)
        input_name = Path(cmd[cmd.index("-i") + 1]).name
        if input_name in self.fail_names:
            return "", "Invalid data found when processing input\n", 1
        Path(cmd[-1]).write_bytes(b"encoded")
        return "", "", 0

    def filters_by_input(self) -> dict[str, str | None]:
        filters = {}
        for cmd in self.commands:
            name = Path(cmd[cmd.index("-i") + 1]).name
            filters[name] = cmd[cmd.index("-vf") + 1] if "-vf" in cmd else None
        return filters


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's config file and DOWNSCALER_* variables out of tests."""
    for var in (
        "DOWNSCALER_LOG_LEVEL",
        "DOWNSCALER_LOG_FORMAT",
        "DOWNSCALER_FFMPEG_PATH",
        "DOWNSCALER_TEMP_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("DOWNSCALER_CONFIG_PATH", str(tmp_path / "no-config.toml"))


@pytest.fixture
def fake_ffmpeg(monkeypatch: pytest.MonkeyPatch) -> FakeFfmpeg:
    fake = FakeFfmpeg()
    monkeypatch.setattr("downscaler.cli.require_tool", lambda *a: Path("/bin/ffmpeg"))
    monkeypatch.setattr("downscaler.executor.transcode.run_command", fake)
    return fake


def _invoke(*args: str):
    return CliRunner().invoke(main, list(args))


class TestHelpAndVersion:
    """Tests for informational options."""

    def test_help(self) -> None:
        result = _invoke("--help")
        assert result.exit_code == 0
        assert "--override" in result.output
        assert "DIR:HEIGHT" in result.output

    def test_version(self) -> None:
        result = _invoke("--version")
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_source_and_destination_required(self) -> None:
        result = _invoke("--scale", "720")
        assert result.exit_code == 2
        assert "Missing option" in result.output


class TestSuccessfulRuns:
    """Tests for runs that complete without failures."""

    def test_transcodes_tree_with_overrides(
        self, video_tree: Path, tmp_path: Path, fake_ffmpeg: FakeFfmpeg
    ) -> None:
        dest = tmp_path / "dest"
        result = _invoke(
            "-s", str(video_tree),
            "-d", str(dest),
            "--scale", "720",
            "--override", "movies/kids:480",
            "--override", "tv:1080",
        )  # fmt: skip

        assert result.exit_code == 0, result.output
        assert "5 files: 5 transcoded, 0 skipped, 0 failed" in result.output
        assert fake_ffmpeg.filters_by_input() == {
            "intro.mp4": "scale=-2:'min(720,ih)'",
            "drama.mkv": "scale=-2:'min(720,ih)'",
            "cartoon.mp4": "scale=-2:'min(480,ih)'",
            "show.mkv": "scale=-2:'min(1080,ih)'",
            "fish.mp4": "scale=-2:'min(720,ih)'",
        }
        assert (dest / "movies" / "kids" / "cartoon.mp4").read_bytes() == b"encoded"
        assert (dest / "movies" / "drama.mp4").exists()

    def test_no_scale_reencodes_only(
        self, video_tree: Path, tmp_path: Path, fake_ffmpeg: FakeFfmpeg
    ) -> None:
        result = _invoke("-s", str(video_tree), "-d", str(tmp_path / "dest"))

        assert result.exit_code == 0, result.output
        assert set(fake_ffmpeg.filters_by_input().values()) == {None}

    def test_dry_run_needs_no_ffmpeg(
        self, video_tree: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def missing(*args):
            raise ToolNotFoundError("ffmpeg")

        monkeypatch.setattr("downscaler.cli.require_tool", missing)
        dest = tmp_path / "dest"

        result = _invoke("-s", str(video_tree), "-d", str(dest), "--dry-run")

        assert result.exit_code == 0, result.output
        assert "5 files: 5 planned" in result.output
        assert not dest.exists()

    def test_rerun_skips_existing(
        self, video_tree: Path, tmp_path: Path, fake_ffmpeg: FakeFfmpeg
    ) -> None:
        dest = tmp_path / "dest"
        _invoke("-s", str(video_tree), "-d", str(dest))

        result = _invoke("-s", str(video_tree), "-d", str(dest))

        assert result.exit_code == 0
        assert "5 files: 0 transcoded, 5 skipped" in result.output

    def test_config_file_overrides_merged_with_cli(
        self, video_tree: Path, tmp_path: Path, fake_ffmpeg: FakeFfmpeg
    ) -> None:
        config = tmp_path / "config.toml"
        config.write_text(
            'scale = 1080\n\n[overrides]\ntv = 480\n"movies/kids" = 360\n'
        )

        result = _invoke(
            "-s", str(video_tree),
            "-d", str(tmp_path / "dest"),
            "--config", str(config),
            "--override", "tv:720",
        )  # fmt: skip

        assert result.exit_code == 0, result.output
        filters = fake_ffmpeg.filters_by_input()
        assert filters["show.mkv"] == "scale=-2:'min(720,ih)'"
        assert filters["cartoon.mp4"] == "scale=-2:'min(360,ih)'"
        assert filters["intro.mp4"] == "scale=-2:'min(1080,ih)'"

    def test_encoder_options(
        self, video_tree: Path, tmp_path: Path, fake_ffmpeg: FakeFfmpeg
    ) -> None:
        dest = tmp_path / "dest"
        result = _invoke(
            "-s", str(video_tree),
            "-d", str(dest),
            "--crf", "22",
            "--preset", "slow",
            "--container", "mkv",
            "--extensions", "mkv",
        )  # fmt: skip

        assert result.exit_code == 0, result.output
        assert len(fake_ffmpeg.commands) == 2
        cmd = fake_ffmpeg.commands[0]
        assert cmd[cmd.index("-crf") + 1] == "22"
        assert cmd[cmd.index("-preset") + 1] == "slow"
        assert (dest / "tv" / "show.mkv").exists()


class TestErrorExits:
    """Tests for non-zero exit codes."""

    @pytest.mark.parametrize(
        "args,message",
        [
            (("--override", "movies"), "DIR:HEIGHT"),
            (("--override", "movies:big"), "expected number"),
            (("--override", "movies:0"), "must be > 0"),
            (("--scale", "abc"), "expected number"),
            (("--scale", ""), "expected number"),
            (("--scale", "²"), "expected number"),
            (("--override", "movies:²"), "expected number"),
            (("--extensions", ","), "No extensions"),
        ],
    )
    def test_invalid_arguments(
        self, video_tree: Path, tmp_path: Path, args: tuple[str, ...], message: str
    ) -> None:
        result = _invoke("-s", str(video_tree), "-d", str(tmp_path / "d"), *args)

        assert result.exit_code == 11
        assert message in result.output

    def test_invalid_config_file(self, video_tree: Path, tmp_path: Path) -> None:
        config = tmp_path / "config.toml"
        config.write_text("[encoder]\ncrf = 99\n")

        result = _invoke(
            "-s", str(video_tree), "-d", str(tmp_path / "d"), "--config", str(config)
        )

        assert result.exit_code == 11
        assert "Invalid config file" in result.output

    def test_missing_source(self, tmp_path: Path) -> None:
        result = _invoke("-s", str(tmp_path / "absent"), "-d", str(tmp_path / "d"))

        assert result.exit_code == 20
        assert "does not exist" in result.output

    def test_ffmpeg_not_found(
        self, video_tree: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def missing(*args):
            raise ToolNotFoundError("ffmpeg")

        monkeypatch.setattr("downscaler.cli.require_tool", missing)

        result = _invoke("-s", str(video_tree), "-d", str(tmp_path / "d"))

        assert result.exit_code == 30
        assert "ffmpeg" in result.output

    def test_partial_failure(
        self, video_tree: Path, tmp_path: Path, fake_ffmpeg: FakeFfmpeg
    ) -> None:
        fake_ffmpeg.fail_names = {"drama.mkv"}

        result = _invoke("-s", str(video_tree), "-d", str(tmp_path / "d"))

        assert result.exit_code == 41
        assert "5 files: 4 transcoded, 0 skipped, 1 failed" in result.output
        assert "failed: movies/drama.mkv" in result.output

    def test_fail_fast_aborts(
        self, video_tree: Path, tmp_path: Path, fake_ffmpeg: FakeFfmpeg
    ) -> None:
        fake_ffmpeg.fail_names = {"drama.mkv"}
        dest = tmp_path / "d"

        result = _invoke("-s", str(video_tree), "-d", str(dest), "--fail-fast")

        assert result.exit_code == 40
        assert "(aborted)" in result.output
        assert len(fake_ffmpeg.commands) == 2
        assert not (dest / "tv").exists()
