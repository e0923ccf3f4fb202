from pathlib import Path

import pytest

import setup_cron


def test_cron_entry():
    entry = setup_cron.cron_entry(6, root=Path("/srv/js"), python=Path("/usr/bin/python3"))
    assert entry.startswith("0 6 * * * cd /srv/js && /usr/bin/python3 -m jobseeker.run_daily --once")
    assert entry.endswith(setup_cron.MARKER)


def test_cron_entry_rejects_bad_hour():
    with pytest.raises(ValueError):
        setup_cron.cron_entry(24)


def test_with_entry_replaces_previous_hour():
    old = setup_cron.cron_entry(8, root=Path("/srv/js"))
    new = setup_cron.cron_entry(6, root=Path("/srv/js"))
    crontab = f"MAILTO=me@example.com\n{old}\n*/5 * * * * backup\n"

    updated = setup_cron.with_entry(crontab, new)

    assert updated.splitlines() == ["MAILTO=me@example.com", "*/5 * * * * backup", new]


def test_without_entry_keeps_other_lines():
    crontab = f"@reboot thing\n{setup_cron.cron_entry(8)}\n"
    assert setup_cron.without_entry(crontab) == ["@reboot thing"]


def test_print_mode_does_not_touch_crontab(monkeypatch, capsys):
    monkeypatch.setenv("DAILY_RUN_HOUR", "9")
    monkeypatch.setattr(setup_cron.subprocess, "run", lambda *a, **k: pytest.fail("crontab called"))
    assert setup_cron.main(["--print"]) == 0
    assert capsys.readouterr().out.startswith("0 9 * * *")
