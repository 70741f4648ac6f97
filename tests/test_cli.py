"""Tests for the asset-tool command line (asset_checker.__main__)."""

import json
import os
import sys
from pathlib import Path

import pytest
from asset_checker.__main__ import main


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # keep .env discovery inside the test directory
    (tmp_path / '.git').mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv('ASSET_TOOL_CONFIG', raising=False)
    monkeypatch.delenv('ASSET_TOOL_WORKERS', raising=False)


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
    monkeypatch.setattr(sys, 'argv', ['asset-tool', *argv])
    try:
        main()
    except SystemExit as exc:
        return int(exc.code or 0)
    return 0


@pytest.fixture
def project(tmp_path: Path, image_file) -> Path:
    root = tmp_path / 'MyApp'
    (root / 'Sources').mkdir(parents=True)
    (root / 'Sources' / 'Home.swift').write_text('Image("logo")\n')
    image_file(root / 'Images' / 'logo.png', size=(100, 100))
    image_file(root / 'Images' / 'orphan.png', size=(100, 100), interlaced=True)
    return root


class TestCommands:
    def test_audit_json(self, project: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        assert _run(monkeypatch, 'audit', str(project), '--json') == 0
        doc = json.loads(capsys.readouterr().out)
        assert [a['name'] for a in doc['unused']] == ['orphan']
        assert len(doc['compliance']['interlacing']) == 1

    def test_unused_text(self, project: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        assert _run(monkeypatch, 'unused', str(project)) == 0
        out = capsys.readouterr().out
        assert 'Images/orphan.png' in out
        assert 'Compliance score' not in out

    def test_single_rule(self, project: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        assert _run(monkeypatch, 'interlacing', str(project), '-j') == 0
        doc = json.loads(capsys.readouterr().out)
        assert set(doc['compliance']) == {'score', 'critical', 'warning', 'total', 'interlacing'}
        assert 'unused' not in doc

    def test_help_lists_rules(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        assert _run(monkeypatch, 'help') == 0
        out = capsys.readouterr().out
        for name in ('catalog', 'color-profile', 'design-quality', 'interlacing'):
            assert name in out

    def test_help_rule(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        assert _run(monkeypatch, 'help', 'catalog') == 0
        assert 'missing-scale-variant' in capsys.readouterr().out

    def test_help_unknown(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        assert _run(monkeypatch, 'help', 'colours') == 1
        assert 'Unknown rule: colours' in capsys.readouterr().err

    def test_no_command(self, monkeypatch: pytest.MonkeyPatch) -> None:
        assert _run(monkeypatch) == 1


class TestErrors:
    def test_missing_root(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        assert _run(monkeypatch, 'audit', str(tmp_path / 'nope')) == 1
        assert capsys.readouterr().err.startswith('Error: ')

    def test_bad_config(self, project: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        config = tmp_path / 'bad.json'
        config.write_text('{"colour": 1}')
        assert _run(monkeypatch, 'audit', str(project), '-c', str(config)) == 1
        assert 'unknown config keys' in capsys.readouterr().err

    def test_bad_workers(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        assert _run(monkeypatch, 'audit', str(project), '-w', '0') == 1


class TestGates:
    def test_fail_on_unused(self, project: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        assert _run(monkeypatch, 'unused', str(project), '--fail-on-unused') == 1
        captured = capsys.readouterr()
        # report is printed before the gate fails
        assert 'Images/orphan.png' in captured.out
        assert 'FAIL: 1 unused image(s)' in captured.err

    def test_fail_under(self, project: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        assert _run(monkeypatch, 'compliance', str(project), '--fail-under', '101') == 1
        assert 'FAIL: compliance score' in capsys.readouterr().err

    def test_gates_pass(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        assert _run(monkeypatch, 'compliance', str(project), '--fail-under', '0') == 0

    def test_env_file_workers(self, project: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        (tmp_path / '.env').write_text('ASSET_TOOL_WORKERS=2\n')
        assert _run(monkeypatch, 'audit', str(project), '-j') == 0
        captured = capsys.readouterr()
        assert 'asset-tool: loaded' in captured.err
        os.environ.pop('ASSET_TOOL_WORKERS', None)
