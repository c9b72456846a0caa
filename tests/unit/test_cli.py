"""CLI tests (local JSON backend under tmp_path)"""

import csv
import io

import pytest
from sgrvias.adapters.local_json import LocalJsonGateway
from sgrvias.entrypoints.cli import main


@pytest.fixture
def data_env(tmp_path, monkeypatch, sample_requests, sample_users):
    """Local backend pre-populated with the sample data"""
    data_path = tmp_path / "data.json"
    gateway = LocalJsonGateway(data_path)
    for user in sample_users:
        gateway.create_user(user)
    for request in sample_requests:
        gateway.create_request(request)

    monkeypatch.setenv("SGR_BACKEND", "local")
    monkeypatch.setenv("SGR_DATA_PATH", str(data_path))
    monkeypatch.setenv("SGR_ROLE_LABELS_PATH", str(tmp_path / "labels.json"))
    monkeypatch.delenv("K_SERVICE", raising=False)
    monkeypatch.delenv("CLOUD_RUN_JOB", raising=False)
    return tmp_path


class TestStats:
    def test_prints_counts(self, data_env, capsys):
        main(["stats"])

        out = capsys.readouterr().out
        assert "Total Geral: 2" in out
        assert "Concluída: 1" in out
        assert "Zonal Norte: 2" in out

    def test_status_filter(self, data_env, capsys):
        main(["stats", "--status", "OPEN"])

        assert "Total Geral: 0" in capsys.readouterr().out


class TestExports:
    def test_export_csv(self, data_env):
        output = data_env / "out" / "relatorio.csv"

        main(["export-csv", str(output), "--search", "paulista"])

        rows = list(csv.reader(io.StringIO(output.read_bytes().decode("utf-8-sig"))))
        assert len(rows) == 2
        assert rows[1][0] == "2024.123456"

    def test_export_single_pdf(self, data_env):
        output = data_env / "req.pdf"

        main(["export-pdf", str(output), "--request-id", "req_002"])

        assert output.read_bytes().startswith(b"%PDF")

    def test_unknown_request_exits_1(self, data_env):
        with pytest.raises(SystemExit) as exc_info:
            main(["export-pdf", str(data_env / "x.pdf"), "--request-id", "nope"])

        assert exc_info.value.code == 1

    def test_empty_pdf_selection_exits_1(self, data_env):
        with pytest.raises(SystemExit) as exc_info:
            main(["export-pdf", str(data_env / "x.pdf"), "--zone", "WEST"])

        assert exc_info.value.code == 1
        assert not (data_env / "x.pdf").exists()


class TestConfigErrors:
    def test_bad_backend_exits_1(self, data_env, monkeypatch):
        monkeypatch.setenv("SGR_BACKEND", "sqlite")

        with pytest.raises(SystemExit) as exc_info:
            main(["stats"])

        assert exc_info.value.code == 1
