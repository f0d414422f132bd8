import json

import pytest

from fakes import FakeOpenAI, FakeSupabase, studio_handler
from logo_studio import cli


@pytest.fixture()
def fake_openai(monkeypatch):
    fake = FakeOpenAI(studio_handler())
    monkeypatch.setattr(cli, "create_openai_client", lambda: fake)
    return fake


def test_run_prints_json(tmp_path, capsys, fake_openai):
    transcript = tmp_path / "meeting.txt"
    transcript.write_text("Designer: What do you make?\nClient: Hull inspection robots.\n", encoding="utf-8")

    cli.cli_main(["run", "--transcript", str(transcript)])

    out = json.loads(capsys.readouterr().out)
    assert out["brandAnalysis"]["companyName"] == "Tidewater Labs"
    assert len(out["logos"]) == 3
    assert "projectId" not in out
    assert "Client: Hull inspection robots." in fake_openai.responses.calls[0]["input"]


def test_run_writes_svgs_and_meta(tmp_path, capsys, fake_openai):
    transcript = tmp_path / "meeting.json"
    transcript.write_text(json.dumps([{"speaker": "Client", "text": "Robots for hulls."}]), encoding="utf-8")
    out_dir = tmp_path / "logos"

    cli.cli_main(["run", "--transcript", str(transcript), "--out-dir", str(out_dir)])

    assert "Wrote 3 SVGs" in capsys.readouterr().out
    for logo_type in ("wordmark", "pictorial", "abstract"):
        assert (out_dir / f"{logo_type}.svg").read_text(encoding="utf-8").startswith("<svg")
    meta = json.loads((out_dir / "meta.json").read_text(encoding="utf-8"))
    assert meta["brandAnalysis"]["industry"] == "Marine robotics"
    assert [c["logoType"] for c in meta["concepts"]] == ["wordmark", "pictorial", "abstract"]


def test_run_rejects_empty_transcript(tmp_path, fake_openai):
    transcript = tmp_path / "empty.txt"
    transcript.write_text("   ", encoding="utf-8")

    with pytest.raises(SystemExit, match="Transcript is empty"):
        cli.cli_main(["run", "--transcript", str(transcript)])
    assert fake_openai.responses.calls == []


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_run_persist_stores_project(tmp_path, capsys, monkeypatch, fake_openai):
    db = FakeSupabase()
    monkeypatch.setattr(cli, "create_supabase_client", lambda: db)
    transcript = tmp_path / "meeting.txt"
    transcript.write_text("Client: Hull inspection robots.\n", encoding="utf-8")

    cli.cli_main(["run", "--transcript", str(transcript), "--persist"])

    out = json.loads(capsys.readouterr().out)
    project = db.tables["projects"][0]
    assert out["projectId"] == project["id"]
    assert project["status"] == "complete"
    assert len(db.tables["logo_concepts"]) == 3
