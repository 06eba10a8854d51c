import pytest


@pytest.fixture
def keys(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
    monkeypatch.setenv("GROQ_API_KEY", "")


def test_list_providers(keys, capsys):
    from clipnote import cli

    assert cli.main(["--list-providers"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Google Gemini: gemini-2.5-pro")
    assert "Groq" not in out


def test_list_providers_without_keys_reports_error(monkeypatch, capsys):
    from clipnote import cli

    monkeypatch.setenv("GEMINI_API_KEY", "")
    monkeypatch.setenv("GROQ_API_KEY", " ")

    assert cli.main(["--list-providers"]) == 1
    assert "ConfigurationError" in capsys.readouterr().err


def test_missing_url_is_a_usage_error(keys):
    from clipnote import cli

    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 2


def test_model_requires_provider(keys):
    from clipnote import cli

    with pytest.raises(SystemExit):
        cli.main(["https://youtu.be/abc123", "--model", "gemini-2.5-flash"])


def test_main_runs_pipeline_with_arguments(keys, monkeypatch, tmp_path, capsys):
    from clipnote import cli

    seen = {}

    async def fake_process_video(url, **kwargs):
        seen["url"] = url
        seen.update(kwargs)
        return tmp_path / "Intro to X.md"

    monkeypatch.setattr(cli, "process_video", fake_process_video)

    code = cli.main(
        [
            "https://youtu.be/abc123",
            "--format",
            "brief",
            "--provider",
            "Google Gemini",
            "--model",
            "gemini-2.5-flash",
            "--output",
            str(tmp_path),
        ]
    )

    assert code == 0
    assert seen["url"] == "https://youtu.be/abc123"
    assert seen["fmt"] == "brief"
    assert seen["provider_name"] == "Google Gemini"
    assert seen["model"] == "gemini-2.5-flash"
    assert seen["settings"].output_path == str(tmp_path)
    assert seen["settings"].configured_keys() == {"Google Gemini": "gem-key"}
    assert "Note saved" in capsys.readouterr().out


def test_main_reports_failures(keys, monkeypatch, capsys):
    from clipnote import cli
    from clipnote.youtube import VideoNotFoundError

    async def fake_process_video(url, **kwargs):
        raise VideoNotFoundError("Video not found or is private")

    monkeypatch.setattr(cli, "process_video", fake_process_video)

    assert cli.main(["https://youtu.be/missing"]) == 1
    err = capsys.readouterr().err
    assert "VideoNotFoundError" in err
    assert "Video not found" in err
