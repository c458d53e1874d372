from __future__ import annotations

import json

import pytest

import apps.cli.main as cli_mod
import services.photoverify as pv_mod
from services.bws.transport import TransportOutcome
from services.errors import TransportError


class FakeSend:
    def __init__(self, status_code=200, body=b"{}", exc=None):
        self.status_code = status_code
        self.body = body
        self.exc = exc
        self.calls = []

    def __call__(self, prepared, timeout_s=None, session=None):
        self.calls.append(prepared)
        if self.exc is not None:
            raise self.exc
        return TransportOutcome(status_code=self.status_code, body=self.body)


@pytest.fixture
def fake_send(monkeypatch):
    def install(**kw):
        send = FakeSend(**kw)
        monkeypatch.setattr(cli_mod, "run_verification", lambda s: pv_mod.run_verification(s, send_fn=send))
        return send
    return install


def _argv(tmp_path, photo, image1, *extra):
    return [
        "-BWSAppID", "app",
        "-BWSAppSecret", "secret",
        "-photo", str(photo),
        "-image1", str(image1),
        "--config", str(tmp_path / "absent.yaml"),
        *extra,
    ]


def test_success_prints_status_and_accuracy(tmp_path, jpeg_path, png_path, fake_send, capsys):
    send = fake_send(body=b'{"Success":true,"AccuracyLevel":199,"Samples":[]}')
    code = cli_mod.main(_argv(tmp_path, jpeg_path, png_path))
    out = capsys.readouterr().out

    assert code == 0
    assert len(send.calls) == 1
    assert "Total execution time:" in out
    assert "Verification Status: True" in out
    assert "Verification Accuracy Level: 199" in out
    assert "Errors:" not in out


def test_sample_errors_are_printed(tmp_path, jpeg_path, png_path, fake_send, capsys):
    fake_send(body=b'{"Success":false,"AccuracyLevel":50,"Samples":[{"Errors":[{"Code":"E1","Message":"low quality","Details":"blur"}]}]}')
    code = cli_mod.main(_argv(tmp_path, jpeg_path, png_path, "--image2", str(jpeg_path)))
    out = capsys.readouterr().out

    assert code == 0
    assert "Verification Status: False" in out
    assert "Sample 1 Errors:" in out
    assert "Code: E1, Message: low quality, Details: blur" in out


def test_json_flag_dumps_result(tmp_path, jpeg_path, png_path, fake_send, capsys):
    fake_send(body=b'{"Success":true,"JobID":"j-1","AccuracyLevel":3,"State":"Done","Samples":[]}')
    assert cli_mod.main(_argv(tmp_path, jpeg_path, png_path, "--json")) == 0
    out = capsys.readouterr().out
    doc = json.loads(out[out.index("{"):])
    assert doc["JobID"] == "j-1"
    assert doc["State"] == "Done"


def test_missing_required_argument_is_usage_error(tmp_path, fake_send, capsys):
    send = fake_send()
    code = cli_mod.main(["-BWSAppID", "app", "--config", str(tmp_path / "absent.yaml")])
    err = capsys.readouterr().err

    assert code == 2
    assert "usage:" in err
    assert "Error [input]" in err
    assert send.calls == []


def test_unsupported_image_exits_non_zero_without_request(tmp_path, gif_path, png_path, fake_send, capsys):
    send = fake_send()
    code = cli_mod.main(_argv(tmp_path, gif_path, png_path))
    err = capsys.readouterr().err

    assert code == 1
    assert "Error [encode]" in err
    assert "image/gif" in err
    assert send.calls == []


def test_http_status_error_exits_non_zero(tmp_path, jpeg_path, png_path, fake_send, capsys):
    fake_send(status_code=500, body=b'{"Success":true,"AccuracyLevel":199,"Samples":[]}')
    code = cli_mod.main(_argv(tmp_path, jpeg_path, png_path))
    captured = capsys.readouterr()

    assert code == 1
    assert "500" in captured.err
    assert "Verification Status" not in captured.out


def test_malformed_body_exits_non_zero(tmp_path, jpeg_path, png_path, fake_send, capsys):
    fake_send(body=b"not json")
    assert cli_mod.main(_argv(tmp_path, jpeg_path, png_path)) == 1
    assert "Error [response]" in capsys.readouterr().err


def test_transport_error_exits_non_zero(tmp_path, jpeg_path, png_path, fake_send, capsys):
    fake_send(exc=TransportError("error sending request to API endpoint: refused"))
    assert cli_mod.main(_argv(tmp_path, jpeg_path, png_path)) == 1
    assert "Error [transport]" in capsys.readouterr().err


def test_long_flag_aliases(tmp_path, jpeg_path, png_path, fake_send):
    send = fake_send(body=b'{"Success":true}')
    code = cli_mod.main([
        "--app-id", "app", "--app-secret", "secret",
        "--photo", str(jpeg_path), "--image1", str(png_path),
        "--config", str(tmp_path / "absent.yaml"),
    ])
    assert code == 0
    assert send.calls[0].headers["Authorization"].startswith("Basic ")
