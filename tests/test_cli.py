"""End-to-end tests for the command-line interface."""

import json
from unittest.mock import patch

import pytest

from chromlift.core.types import CoordinateInterval
from chromlift.main import cli
from chromlift.modules.output import parse_json

from conftest import FakeProvider, make_segment


REGION = CoordinateInterval("10", 25000, 30000)
OTHER = CoordinateInterval("10", 40000, 40100)


@pytest.fixture
def provider():
    return FakeProvider({
        REGION: [
            make_segment(0, 1999, name="10", start=24975, end=26974),
            make_segment(2000, 5000, name="10", start=40000, end=43000, strand=-1)
        ],
        OTHER: [make_segment(0, 100, name="10", start=39900, end=40000)]
    })


def test_region_to_json_on_stdout(provider, capsys):
    with patch("chromlift.pipeline.connect", return_value=provider):
        cli(["10", "25000", "30000", "--quiet"])

    mappings = parse_json(capsys.readouterr().out)
    assert [(m.original.start, m.original.end) for m in mappings] == [(25000, 26999), (27000, 30000)]
    assert mappings[0].original.assembly == "GRCh37"
    assert mappings[1].mapped.strand == -1
    assert provider.closed


def test_file_to_bed_file(provider, tmp_path):
    bed = tmp_path / "in.bed"
    bed.write_text("10\t25000\t30000\n10\t40000\t40100\n")
    out = tmp_path / "out.bed"

    with patch("chromlift.pipeline.connect", return_value=provider):
        cli(["--input-file", str(bed), "--format", "BED", "--output", str(out), "-q"])

    assert out.read_text().splitlines() == [
        "10 24975 26974",
        "10 40000 43000",
        "10 39900 40000"
    ]


def test_unknown_format_fails_before_connecting(capsys):
    with patch("chromlift.pipeline.connect") as mock_connect:
        with pytest.raises(SystemExit) as excinfo:
            cli(["10", "1", "2", "--format", "gff", "-q"])

    assert excinfo.value.code == 1
    mock_connect.assert_not_called()
    assert "Unsupported output format" in capsys.readouterr().err


def test_bad_region_fails_before_connecting(capsys):
    with patch("chromlift.pipeline.connect") as mock_connect:
        with pytest.raises(SystemExit) as excinfo:
            cli(["10", "300", "200", "-q"])

    assert excinfo.value.code == 1
    mock_connect.assert_not_called()
    assert "Error:" in capsys.readouterr().err


def test_provider_failure_writes_nothing(tmp_path, capsys):
    bed = tmp_path / "in.bed"
    bed.write_text("10\t25000\t30000\n10\t40000\t40100\n10\t1\t5\n")
    out = tmp_path / "out.json"
    failing = FakeProvider({REGION: [make_segment(0, 10)]}, fail_on=OTHER)

    with patch("chromlift.pipeline.connect", return_value=failing):
        with pytest.raises(SystemExit) as excinfo:
            cli(["-i", str(bed), "-o", str(out), "-q"])

    assert excinfo.value.code == 1
    assert not out.exists()
    assert "service unavailable" in capsys.readouterr().err
    assert failing.closed


def test_region_needs_three_values():
    with pytest.raises(SystemExit) as excinfo:
        cli(["10", "25000"])
    assert excinfo.value.code == 2


def test_assembly_and_provider_overrides(provider, tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"provider": {"species": "homo_sapiens"}}))

    with patch("chromlift.pipeline.connect", return_value=provider) as mock_connect:
        cli(["10", "25000", "30000", "-c", str(config_path), "--from", "GRCh38", "--to", "GRCh37",
             "--timeout", "5", "--no-check-connection", "-o", str(tmp_path / "out.json"), "-q"])

    config = mock_connect.call_args[0][0]
    assert config["assembly"] == {"source": "GRCh38", "target": "GRCh37"}
    assert config["provider"]["species"] == "homo_sapiens"
    assert config["provider"]["timeout"] == 5.0
    assert config["provider"]["check_connection"] is False


def test_init_config(tmp_path, capsys):
    path = tmp_path / "chromlift.yaml"
    cli(["--init-config", str(path)])
    assert path.exists()
    assert "Created default configuration" in capsys.readouterr().out


def test_log_file_receives_messages(provider, tmp_path):
    log_file = tmp_path / "run.log"
    with patch("chromlift.pipeline.connect", return_value=provider):
        cli(["10", "25000", "30000", "-o", str(tmp_path / "out.json"), "--log-file", str(log_file)])
    assert "Lifted 1 intervals into 2 mappings" in log_file.read_text()


def test_provider_failure_reported_once_with_region(tmp_path, capsys):
    bed = tmp_path / "in.bed"
    bed.write_text("10\t25000\t30000\n10\t40000\t40100\n")
    failing = FakeProvider({REGION: [make_segment(0, 10)]}, fail_on=OTHER)

    with patch("chromlift.pipeline.connect", return_value=failing):
        with pytest.raises(SystemExit):
            cli(["-i", str(bed)])

    err_lines = [line for line in capsys.readouterr().err.splitlines() if "service unavailable" in line]
    assert err_lines == ["Error: service unavailable (interval 10:40000-40100)"]
