import pytest

from recruitment_api.db import run_migrations


@pytest.fixture
def calls(monkeypatch):
    recorded = []

    def fake(name):
        def _record(cfg, *args, **kwargs):
            recorded.append((name, args, kwargs))

        return _record

    for name in ("upgrade", "downgrade", "revision", "current"):
        monkeypatch.setattr(run_migrations.command, name, fake(name))
    return recorded


def test_config_points_at_bundled_migrations():
    cfg = run_migrations.build_config()
    assert cfg.get_main_option("script_location").endswith("migrations")
    assert cfg.get_main_option("sqlalchemy.url").startswith("sqlite")


@pytest.mark.parametrize("argv, code", [([], 1), (["explode"], 2), (["migrate:make"], 2), (["show"], 2)])
def test_bad_invocations_exit(argv, code, calls):
    with pytest.raises(SystemExit) as excinfo:
        run_migrations.main(argv)
    assert excinfo.value.code == code
    assert calls == []


def test_migrate_verbs(calls):
    run_migrations.main(["migrate"])
    run_migrations.main(["migrate:rollback"])
    run_migrations.main(["migrate:make", "add", "gym", "capacity"])
    run_migrations.main(["upgrade"])
    assert calls == [
        ("upgrade", ("head",), {}),
        ("downgrade", ("-1",), {}),
        ("revision", (), {"message": "add gym capacity", "autogenerate": True}),
        ("upgrade", ("head",), {}),
    ]
