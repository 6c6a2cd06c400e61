from __future__ import annotations

from typer.testing import CliRunner

from lampctl import cli
from lampctl.core.model import ColorIntensity, DetectedLamp, LampConfig
from lampctl.core.service import LampService


class FakeTransport:
    def __init__(self, *, present: bool = True, status: int = 8) -> None:
        self.present = present
        self.status = status
        self.reports: list[bytes] = []
        self.closes = 0

    def open(self, vendor_id: int, product_id: int):
        return "handle" if self.present else None

    def send_feature_report(self, handle, data: bytes) -> int:
        self.reports.append(data)
        return self.status

    def close(self, handle) -> None:
        self.closes += 1

    def enumerate(self, vendor_id: int, product_id: int):
        if not self.present:
            return []
        return [DetectedLamp(path="1-2:1.0", serial="0001", product="USB IO Controller")]


runner = CliRunner()


def _install(
    monkeypatch,
    transport: FakeTransport,
    config: LampConfig | None = None,
    slept: list[float] | None = None,
) -> None:
    sink = slept if slept is not None else []

    def factory() -> LampService:
        return LampService(transport=transport, sleep=sink.append, config=config or LampConfig())

    monkeypatch.setattr(cli, "LampService", factory)


def test_play_command_sends_cycle(monkeypatch) -> None:
    transport = FakeTransport()
    _install(monkeypatch, transport)

    result = runner.invoke(cli.app, ["play", "--red", "--on", "1000", "--off", "200", "--buzzer", "5"])

    assert result.exit_code == 0
    assert "Played play (4 commands)" in result.stdout
    assert [raw[1] for raw in transport.reports] == [70, 34, 2, 2]
    assert transport.closes == 1


def test_play_command_hex_color_and_count(monkeypatch) -> None:
    transport = FakeTransport()
    _install(monkeypatch, transport)

    result = runner.invoke(cli.app, ["play", "--color", "dead00", "--count", "2"])

    assert result.exit_code == 0
    assert "Played play, play" in result.stdout
    assert "(10 commands)" in result.stdout
    assert [raw[1] for raw in transport.reports].count(70) == 2


def test_play_count_three_plays_three_cycles(monkeypatch) -> None:
    transport = FakeTransport()
    _install(monkeypatch, transport)

    result = runner.invoke(cli.app, ["play", "--blue", "--count", "3"])

    assert result.exit_code == 0
    assert "Played play, play, play (12 commands)" in result.stdout


def test_play_with_tada_runs_fanfare_first(monkeypatch) -> None:
    transport = FakeTransport()
    _install(monkeypatch, transport)

    result = runner.invoke(cli.app, ["play", "--tada", "--green"])

    assert result.exit_code == 0
    assert "Played tada, play" in result.stdout
    assert [raw[3] for raw in transport.reports[:6]] == [15, 12, 10, 7, 15, 7]


def test_conflicting_colors_error_is_clean(monkeypatch) -> None:
    transport = FakeTransport()
    _install(monkeypatch, transport)

    result = runner.invoke(cli.app, ["play", "--red", "--color", "00ff00"])

    assert result.exit_code == 1
    assert "Error: Use only one of" in result.stderr
    assert transport.reports == []


def test_illegal_color_error_is_clean(monkeypatch) -> None:
    _install(monkeypatch, FakeTransport())
    result = runner.invoke(cli.app, ["play", "--color", "nothex"])
    assert result.exit_code == 1
    assert "Illegal color string" in result.stderr
    assert "Traceback" not in result.stdout
    assert "Traceback" not in result.stderr


def test_missing_lamp_error(monkeypatch) -> None:
    _install(monkeypatch, FakeTransport(present=False))
    result = runner.invoke(cli.app, ["tada"])
    assert result.exit_code == 1
    assert "not found" in result.stderr


def test_transport_failure_error(monkeypatch) -> None:
    transport = FakeTransport(status=-1)
    _install(monkeypatch, transport)
    result = runner.invoke(cli.app, ["play", "--blue"])
    assert result.exit_code == 1
    assert "Error: Feature report write failed" in result.stderr
    assert len(transport.reports) == 1
    assert transport.closes == 1


def test_sequence_command(monkeypatch) -> None:
    transport = FakeTransport()
    _install(monkeypatch, transport)

    result = runner.invoke(cli.app, ["sequence", "blue:1000", "dead00:100:200:5"])

    assert result.exit_code == 0
    assert "Played 2 cycle(s)" in result.stdout
    # blue: buzz, pwm, enable, off; dead00: buzz, 2x pwm, enable, off
    assert len(transport.reports) == 9
    assert transport.reports[4][:4] == bytes([102, 70, 1, 5])


def test_sequence_carries_settings_into_later_cycles(monkeypatch) -> None:
    transport = FakeTransport()
    slept: list[float] = []
    _install(monkeypatch, transport, slept=slept)

    result = runner.invoke(cli.app, ["sequence", "blue:1000:300:5", "dead00"])

    assert result.exit_code == 0
    assert slept == [1.0, 0.3, 1.0, 0.3]
    assert transport.reports[4][:4] == bytes([102, 70, 1, 5])


def test_sequence_rejects_bad_cycle(monkeypatch) -> None:
    _install(monkeypatch, FakeTransport())
    result = runner.invoke(cli.app, ["sequence", "red:fast"])
    assert result.exit_code == 1
    assert "Illegal number" in result.stderr


def test_buzz_command(monkeypatch) -> None:
    transport = FakeTransport()
    _install(monkeypatch, transport)
    result = runner.invoke(cli.app, ["buzz", "--buzzer", "3", "--duration", "500"])
    assert result.exit_code == 0
    assert transport.reports == [bytes([102, 70, 1, 3, 0, 0, 0, 0, 1, 10, 0, 0, 0, 0, 0, 0])]


def test_buzz_rejects_frequency_out_of_range(monkeypatch) -> None:
    transport = FakeTransport()
    _install(monkeypatch, transport)
    result = runner.invoke(cli.app, ["buzz", "--buzzer", "300"])
    assert result.exit_code == 1
    assert transport.reports == []


def test_blink_with_cycles(monkeypatch) -> None:
    transport = FakeTransport()
    _install(monkeypatch, transport)
    result = runner.invoke(cli.app, ["blink", "--color", "green", "--cycles", "3"])
    assert result.exit_code == 0
    assert [raw[2] for raw in transport.reports] == [0b110, 0x07] * 3


def test_pulse_command(monkeypatch) -> None:
    transport = FakeTransport()
    _install(monkeypatch, transport)
    result = runner.invoke(cli.app, ["pulse", "1", "2"])
    assert result.exit_code == 0
    assert transport.reports[0][:4] == bytes([102, 76, 1, 2])


def test_colors_command_lists_user_colors(monkeypatch) -> None:
    config = LampConfig(colors={"alert": ColorIntensity(255, 64, 0)}, warnings=("User color 'alert' is odd",))
    _install(monkeypatch, FakeTransport(), config)
    result = runner.invoke(cli.app, ["colors"])
    assert result.exit_code == 0
    assert "alert: ff4000" in result.stdout
    assert "red: ff0000" in result.stdout
    assert "Warning: User color 'alert' is odd" in result.stderr


def test_devices_command(monkeypatch) -> None:
    _install(monkeypatch, FakeTransport())
    result = runner.invoke(cli.app, ["devices"])
    assert result.exit_code == 0
    assert "USB IO Controller serial=0001" in result.stdout


def test_devices_command_without_lamp(monkeypatch) -> None:
    _install(monkeypatch, FakeTransport(present=False))
    result = runner.invoke(cli.app, ["devices"])
    assert result.exit_code == 1
    assert "No lamp found" in result.stdout
