"""Tests for the mindshare CLI.

Exit codes: 0 success, 1 internal error, 2 invalid input.
"""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any

import pytest

from mindshare import cli
from mindshare.cli import main

SAMPLE_TEXT = (
    "Agenda: Objective review. Document liquidity and risk tolerance. "
    "Disclosure summary logged. CRM updated."
)


def _run(capsys: pytest.CaptureFixture[str], argv: list[str]) -> tuple[int, Any]:
    code = main(argv)
    out = capsys.readouterr().out
    return code, json.loads(out)


class TestGenerate:
    def test_generate_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, data = _run(capsys, ["generate", "--seed", "demo", "--count", "8"])

        assert code == 0
        assert data["seed"] == "demo"
        assert len(data["briefs"]) == 8

    def test_generate_is_deterministic(self, capsys: pytest.CaptureFixture[str]) -> None:
        _, first = _run(capsys, ["generate", "--seed", "demo", "--count", "8"])
        _, second = _run(capsys, ["generate", "--seed", "demo", "--count", "8"])
        assert [b["compliance_iq"] for b in first["briefs"]] == [
            b["compliance_iq"] for b in second["briefs"]
        ]

    def test_generate_to_file(self, capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
        out = tmp_path / "universe.json"
        code, summary = _run(capsys, ["generate", "--seed", "demo", "--count", "5", "--out", str(out)])

        assert code == 0
        assert summary == {"advisors": 25, "briefs": 5, "out": str(out)}
        assert len(json.loads(out.read_text(encoding="utf-8"))["briefs"]) == 5

    def test_count_from_env(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MINDSHARE_BASE_COUNT", "4")
        monkeypatch.setenv("MINDSHARE_DEFAULT_SEED", "env-seed")
        _, data = _run(capsys, ["generate"])
        assert data["seed"] == "env-seed"
        assert len(data["briefs"]) == 4

    def test_zero_count_is_invalid(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, data = _run(capsys, ["generate", "--count", "0"])
        assert code == 2
        assert data["code"] == "INVALID_INPUT"


class TestScore:
    def test_score_text(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, data = _run(capsys, ["score", "--text", SAMPLE_TEXT])

        assert code == 0
        assert data["compliance_iq"] == 86
        assert data["weak_topics"] == ["time_horizon"]

    def test_score_with_topics(self, capsys: pytest.CaptureFixture[str]) -> None:
        _, data = _run(capsys, ["score", "--text", SAMPLE_TEXT, "--topics", "time_horizon"])
        assert data["compliance_iq"] == 100
        assert data["weak_topics"] == []

    def test_score_from_file(self, capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
        path = tmp_path / "brief.txt"
        path.write_text("Returns are guaranteed.", encoding="utf-8")
        code, data = _run(capsys, ["score", "--input", str(path)])

        assert code == 0
        assert [f["text"] for f in data["flags"]] == ["guaranteed"]

    def test_score_from_stdin(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(SAMPLE_TEXT))
        _, data = _run(capsys, ["score"])
        assert data["compliance_iq"] == 86

    def test_unknown_topic_is_invalid(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, data = _run(capsys, ["score", "--text", "x", "--topics", "estate"])
        assert code == 2
        assert data["code"] == "INVALID_INPUT"
        assert "allowed" in data["details"]

    def test_missing_file_is_invalid(
        self, capsys: pytest.CaptureFixture[str], tmp_path: Path
    ) -> None:
        code, data = _run(capsys, ["score", "--input", str(tmp_path / "missing.txt")])
        assert code == 2
        assert data["code"] == "INVALID_INPUT"

    def test_unknown_rule_set_is_invalid(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MINDSHARE_RULE_SET", "bogus")
        code, _ = _run(capsys, ["score", "--text", SAMPLE_TEXT])
        assert code == 2


class TestGraph:
    def test_graph_from_seed(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, data = _run(capsys, ["graph", "--seed", "demo", "--count", "15", "--k", "2"])

        assert code == 0
        assert len(data["nodes"]) == 15
        for link in data["links"]:
            assert link["source"] != link["target"]

    def test_graph_from_universe_file(
        self, capsys: pytest.CaptureFixture[str], tmp_path: Path
    ) -> None:
        out = tmp_path / "universe.json"
        main(["generate", "--seed", "demo", "--count", "10", "--out", str(out)])
        capsys.readouterr()

        code, data = _run(capsys, ["graph", "--input", str(out), "--cluster-mode", "product"])
        universe = json.loads(out.read_text(encoding="utf-8"))
        products = {b["id"]: b["product"] for b in universe["briefs"]}

        assert code == 0
        assert all(n["cluster_key"] == products[n["id"]] for n in data["nodes"])

    def test_graph_from_brief_list(
        self, capsys: pytest.CaptureFixture[str], tmp_path: Path
    ) -> None:
        out = tmp_path / "universe.json"
        main(["generate", "--seed", "demo", "--count", "6", "--out", str(out)])
        capsys.readouterr()
        briefs_path = tmp_path / "briefs.json"
        briefs_path.write_text(
            json.dumps(json.loads(out.read_text(encoding="utf-8"))["briefs"]), encoding="utf-8"
        )

        _, data = _run(capsys, ["graph", "--input", str(briefs_path)])
        assert len(data["nodes"]) == 6

    def test_malformed_brief_file_is_invalid(
        self, capsys: pytest.CaptureFixture[str], tmp_path: Path
    ) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"id": "brief-1"}]), encoding="utf-8")

        code, data = _run(capsys, ["graph", "--input", str(path)])
        assert code == 2
        assert data["details"]["errors"]

    def test_negative_k_is_invalid(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, _ = _run(capsys, ["graph", "--count", "5", "--k", "-1"])
        assert code == 2


class TestAudit:
    def test_audit_payload(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, data = _run(capsys, ["audit", "--seed", "demo", "--count", "30"])

        assert code == 0
        assert set(data) == {"insights", "snapshot", "stats"}
        assert data["stats"]["briefs_visible"] == 30
        assert len(data["snapshot"]["low_performers"]) == 3

    def test_audit_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        _, data = _run(
            capsys, ["audit", "--seed", "demo", "--count", "30", "--office", "West", "--min-iq", "50"]
        )

        assert data["snapshot"]["filters"]["offices"] == ["West"]
        assert data["snapshot"]["filters"]["compliance_range"] == [50, 100]

    def test_inverted_range_is_invalid(self, capsys: pytest.CaptureFixture[str]) -> None:
        code, data = _run(capsys, ["audit", "--count", "5", "--min-iq", "80", "--max-iq", "20"])
        assert code == 2
        assert data["code"] == "INVALID_INPUT"


class TestMain:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 0
        assert "mindshare" in capsys.readouterr().out

    def test_unexpected_error_exits_1(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def explode(_args: Any) -> int:
            raise RuntimeError("boom")

        monkeypatch.setitem(cli.COMMANDS, "score", explode)
        code, data = _run(capsys, ["score", "--text", "x"])

        assert code == 1
        assert data["code"] == "INTERNAL_ERROR"
