import pytest

import main


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    monkeypatch.setenv("EXAM_ROSTER_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    students = tmp_path / "students.csv"
    students.write_text("roll_no\ns1\ns2\ns3\n")
    return students


def test_rerun_keeps_existing_rooms(cli_env, capsys):
    args = [str(cli_env), "--subject", "Math", "--room", "A:2", "--room", "B:3"]
    assert main.main(args) == 0
    assert main.main(args) == 0
    out = capsys.readouterr().out
    assert "Room A | 2 students | s1, s2" in out
    assert "Room B | 1 students | s3" in out


def test_missing_students_file(cli_env, capsys):
    missing = cli_env.parent / "nope.csv"
    assert main.main([str(missing), "--subject", "Math", "--room", "A:2"]) == 1
    assert "Cannot read" in capsys.readouterr().out


def test_bad_room_argument():
    with pytest.raises(SystemExit):
        main.main(["students.csv", "--subject", "Math", "--room", "A"])
