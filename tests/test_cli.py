"""Tests for the command line interface."""

import logging

import pytest
from click.testing import CliRunner

from memsig import __version__
from memsig.cli import cli
from test_elf_extractor import SEGMENTS, build_elf


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    for var in ("MEMSIG_PAGE_SIZE", "MEMSIG_SIGSIZE_THRESHOLD", "MEMSIG_MAX_DISTANCE",
                "MEMSIG_STRATEGY"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    logger = logging.getLogger("memsig")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def runner():
    return CliRunner()


def product_args(sw_tree, *rest):
    return ["-s", "demo", "-d", str(sw_tree), "-b", "bin", "-p", "16", *rest]


class TestVsigsCommand:

    def test_writes_signatures(self, runner, sw_tree):
        result = runner.invoke(cli, product_args(sw_tree, "vsigs"))
        assert result.exit_code == 0, result.output

        outdir = sw_tree / "vsigs"
        assert sorted(p.name for p in outdir.glob("*.sig")) == [
            "demo-1.0.sig", "demo-1.1.sig", "demo-1.2.sig",
        ]
        assert (outdir / "info.txt").read_text() == "Software: demo\nPage size: 16\n"
        assert (outdir / "sigstats.csv").read_text().splitlines()[1] == "1.0;3;1;0;0;2"
        assert "Wrote 3 signatures" in result.output

    def test_custom_outdir(self, runner, sw_tree, tmp_path):
        result = runner.invoke(cli, product_args(sw_tree, "vsigs", "--outdir", str(tmp_path / "out")))
        assert result.exit_code == 0, result.output
        assert (tmp_path / "out" / "demo-1.2.sig").is_file()

    def test_config_file(self, runner, sw_tree, tmp_path):
        config = tmp_path / "run.yml"
        config.write_text("analysis:\n  page_size: 16\noutput:\n  vsigs_dir: sigs16\n")
        result = runner.invoke(cli, ["--config", str(config), "-s", "demo", "-d", str(sw_tree),
                                     "-b", "bin", "vsigs"])
        assert result.exit_code == 0, result.output
        assert (sw_tree / "sigs16" / "demo-1.0.sig").is_file()

    def test_environment_page_size(self, runner, sw_tree, monkeypatch):
        monkeypatch.setenv("MEMSIG_PAGE_SIZE", "16")
        result = runner.invoke(cli, ["-s", "demo", "-d", str(sw_tree), "-b", "bin", "vsigs"])
        assert result.exit_code == 0, result.output


class TestCompareCommand:

    def test_writes_tables(self, runner, sw_tree):
        result = runner.invoke(cli, product_args(sw_tree, "compare", "--show"))
        assert result.exit_code == 0, result.output
        for name in ("comp.csv", "dupl.csv", "dupl-rel.csv"):
            assert (sw_tree / "comp" / name).is_file()
        assert (sw_tree / "comp" / "dupl.csv").read_text().splitlines()[1] == "1.0;3;3;2;1"
        assert "Matching pages" in result.output


class TestGroupsCommand:

    def test_similarity(self, runner, sw_tree):
        result = runner.invoke(cli, product_args(sw_tree, "groups"))
        assert result.exit_code == 0, result.output
        assert (sw_tree / "groups" / "demo-1.0+1.1+1.2.sig").is_file()
        assert (sw_tree / "groups" / "groupconfig.csv").is_file()
        assert (sw_tree / "groups" / "groupstats.csv").is_file()
        assert "Average signature size" in result.output

    def test_zero_distance_keeps_singletons(self, runner, sw_tree):
        result = runner.invoke(cli, product_args(sw_tree, "groups", "--strategy", "neighbour",
                                                 "--max-dist", "0"))
        assert result.exit_code == 0, result.output
        assert len(list((sw_tree / "groups").glob("*.sig"))) == 3

    def test_invalid_threshold(self, runner, sw_tree):
        result = runner.invoke(cli, product_args(sw_tree, "groups", "--threshold", "2"))
        assert result.exit_code == 1
        assert "Error" in result.output
        assert not (sw_tree / "groups").exists()

    def test_unknown_strategy(self, runner, sw_tree):
        result = runner.invoke(cli, product_args(sw_tree, "groups", "--strategy", "random"))
        assert result.exit_code == 2


class TestExtractCommand:

    def test_extract(self, runner, tmp_path):
        binary = tmp_path / "bin"
        binary.write_bytes(build_elf(SEGMENTS))
        result = runner.invoke(cli, ["extract", str(binary), str(tmp_path / "parts"), "-p", "16"])
        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in (tmp_path / "parts").iterdir()) == ["0.seg", "2.seg"]
        assert "Extracted 2 segments" in result.output

    def test_not_elf(self, runner, tmp_path):
        binary = tmp_path / "notes.txt"
        binary.write_text("hello")
        result = runner.invoke(cli, ["extract", str(binary), str(tmp_path / "parts")])
        assert result.exit_code == 1
        assert "I/O error" not in result.output
        assert "Error" in result.output


class TestErrors:
    """Test exit statuses."""

    def test_missing_software_options(self, runner, sw_tree):
        result = runner.invoke(cli, ["-d", str(sw_tree), "vsigs"])
        assert result.exit_code == 2
        assert "-s/--software" in result.output

    def test_missing_swpath(self, runner, tmp_path):
        result = runner.invoke(cli, product_args(tmp_path / "missing", "vsigs"))
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_bad_page_size(self, runner, sw_tree):
        result = runner.invoke(cli, ["-s", "demo", "-d", str(sw_tree), "-b", "bin",
                                     "-p", "1000", "vsigs"])
        assert result.exit_code == 1

    def test_missing_binary(self, runner, sw_tree):
        (sw_tree / "versions" / "1.3").mkdir()
        result = runner.invoke(cli, product_args(sw_tree, "vsigs"))
        assert result.exit_code == 1
        assert "I/O error" in result.output
        assert not (sw_tree / "vsigs").exists()

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
