from syllabuscal.app import main

SYLLABUS = "Midterm exam on 10/15 at 2pm\nProject proposal due 11/01\nHomework 1 due 1/2\n"


def test_main_lists_upcoming_and_exports(tmp_path, capsys):
    code = main(["--text", SYLLABUS, "--now", "2026-01-05T09:00", "--limit", "2", "--export", str(tmp_path)])

    out = capsys.readouterr().out
    assert code == 0
    assert "Extracted 3 event(s); 2 upcoming:" in out
    assert "[exam] 10/15 at 2pm - 10/15/2026, 2:00:00 PM" in out
    assert "[project] 11/01 - 11/1/2026, 12:00:00 PM" in out
    assert (tmp_path / "syllabus-calendar.ics").read_bytes().count(b"BEGIN:VEVENT") == 3


def test_main_reads_file_argument(tmp_path, capsys):
    path = tmp_path / "syllabus.txt"
    path.write_text(SYLLABUS, encoding="utf-8")

    assert main([str(path), "--now", "2026-01-05T09:00", "--limit", "5"]) == 0
    assert "Extracted 3 event(s); 3 upcoming:" in capsys.readouterr().out


def test_main_warns_on_empty_text(capsys):
    assert main(["--text", "", "--now", "2026-01-05T09:00", "--limit", "5"]) == 1
    assert "Please upload or paste a syllabus first!" in capsys.readouterr().out


def test_main_refuses_to_export_nothing(tmp_path, capsys):
    code = main(["--text", "No dates here.", "--now", "2026-01-05T09:00", "--limit", "5", "--export", str(tmp_path)])

    assert code == 1
    assert "No events to export!" in capsys.readouterr().out
    assert not (tmp_path / "syllabus-calendar.ics").exists()
