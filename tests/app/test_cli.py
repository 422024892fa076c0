from __future__ import annotations

import logging

import pytest

from edensync.app import TimelineReport
from edensync.domain.growth import get_growth_model
from edensync.domain.reconciliation import StageNotification, TimelineSummary
from edensync.ui import cli
from tests.helpers.reconciliation import OWNER, make_throw


def _report(*, error: str | None = None) -> TimelineReport:
    model = get_growth_model("temperate-herb")
    assert model is not None
    fruiting = next(stage for stage in model.stages if stage.id == "fruiting")
    return TimelineReport(
        owner_key=OWNER,
        timeline=[make_throw(local_id="local-1", is_pending=True), make_throw(1)],
        harvests=[],
        stages=[
            StageNotification(
                local_id="chain-1",
                ledger_id=1,
                growth_model_id="temperate-herb",
                stage=fruiting,
                progress_percent=61,
                days_since=110,
            )
        ],
        summary=TimelineSummary(total=2, pending=1, dominant_stage=fruiting, harvestable=1),
        error=error,
    )


def test_timeline_command_prints_summary(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    captured: dict[str, object] = {}

    def fake_show_timeline(owner_key: str, **kwargs: object) -> TimelineReport:
        captured["owner_key"] = owner_key
        captured.update(kwargs)
        return _report()

    monkeypatch.setattr(cli, "show_timeline", fake_show_timeline)

    cli.main(["timeline", "--owner", OWNER, "--watch", "15"])

    out = capsys.readouterr().out
    assert captured == {"owner_key": OWNER, "watch_seconds": 15.0}
    assert "2 throw(s), 1 pending, 1 harvestable" in out
    assert "[pending]" in out
    assert "[#1]" in out


def test_stages_command_marks_harvestable(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(cli, "show_timeline", lambda owner_key, **_: _report(error="slow"))

    cli.main(["stages", "--owner", OWNER])

    out = capsys.readouterr().out
    assert "#1" in out
    assert "61%" in out
    assert "*" in out
    assert "warning: slow" in out


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["timeline"],
        ["timeline", "--owner", OWNER, "--watch", "-1"],
        ["timeline", "--owner", "  "],
        ["unknown"],
    ],
)
def test_invalid_arguments_exit_with_code_two(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)

    assert excinfo.value.code == 2


def test_fatal_errors_exit_with_code_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(owner_key: str, **_: object) -> TimelineReport:
        raise RuntimeError(f"cache unavailable for {owner_key}")

    monkeypatch.setattr(cli, "show_timeline", broken)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["timeline", "--owner", OWNER])

    assert excinfo.value.code == 1


def test_verbose_flag_enables_debug_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    levels: list[int] = []
    monkeypatch.setattr(cli, "show_timeline", lambda owner_key, **_: _report())
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: levels.append(kwargs["level"]))

    cli.main(["stages", "--owner", OWNER, "--verbose"])

    assert levels == [logging.DEBUG]
