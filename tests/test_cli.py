import requests

from tailmon import cli


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        return self.payload


def test_burst_posts_to_loadgen(monkeypatch, capsys):
    seen = {}

    def fake_post(url, params=None, timeout=None):
        seen.update(url=url, params=params, timeout=timeout)
        return FakeResponse({"ok": True, "written": params["count"]})

    monkeypatch.setattr(cli.requests, "post", fake_post)
    monkeypatch.setenv("TAILMON_URL", "http://mon:7000/")
    monkeypatch.setenv("TAILMON_BURST_COUNT", "12")

    assert cli.burst() == 0
    assert seen["url"] == "http://mon:7000/loadgen"
    assert seen["params"] == {"count": 12}
    assert "'written': 12" in capsys.readouterr().out


def test_burst_reports_http_failure(monkeypatch, capsys):
    monkeypatch.setattr(cli.requests, "post", lambda *a, **kw: FakeResponse({}, status=503))
    assert cli.burst(count=1, url="http://mon:7000") == 1
    assert "burst failed" in capsys.readouterr().err


def test_main_runs_app_factory(monkeypatch):
    calls = {}
    monkeypatch.setattr(cli.uvicorn, "run", lambda target, **kw: calls.update(target=target, **kw))
    monkeypatch.setenv("TAILMON_PORT", "7100")

    cli.main()

    assert calls["target"] == "tailmon.app:create_app"
    assert calls["factory"] is True
    assert calls["port"] == 7100
