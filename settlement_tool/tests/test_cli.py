"""
Tests for the command-line interface.
"""
import pandas as pd

from settlement_tool.cli.main import main
from settlement_tool.config.project_manager import ProjectManager


def write_inputs(tmp_path):
    rows = tmp_path / "rows.csv"
    rows.write_text(
        "object,cycle,id,mark,settl,total\n"
        "1,1,1,100.000,0,0\n"
        "1,1,2,100.500,0,0\n"
        "1,2,1,99.995,-5,-5\n"
        "1,2,2,100.500,0,0\n"
        "1,2,3,нет доступа,,\n",
        encoding="utf-8",
    )
    coords = tmp_path / "coords.csv"
    coords.write_text("id,x,y\n1,0,0\n2,3,4\n", encoding="utf-8")
    return rows, coords


def import_project(tmp_path):
    rows, coords = write_inputs(tmp_path)
    project = tmp_path / "site.json"
    code = main(["import", str(rows), "--coords", str(coords), "--unit", "m", "-o", str(project)])
    assert code == 0
    return project


def test_import_creates_project(tmp_path):
    project_path = import_project(tmp_path)
    project = ProjectManager().load_project(str(project_path))

    assert sorted(project.objects[1]) == [1, 2]
    assert project.cycle == 2
    assert [r.id for r in project.data_rows] == ["1", "2", "3"]
    assert project.coord_rows[1].x == 3000.0


def test_report_command(tmp_path, capsys):
    project = import_project(tmp_path)
    summary = tmp_path / "summary.txt"
    pairs = tmp_path / "pairs.csv"

    code = main(["report", str(project), "--cycle", "2", "-o", str(summary), "--pairs", str(pairs)])
    assert code == 0

    out = capsys.readouterr().out
    assert "Цикл 2" in out
    assert "-5.00" in out
    assert summary.exists()
    df = pd.read_csv(pairs)
    assert len(df) == 1
    assert df.iloc[0]['Ratio'] == 0.001


def test_groups_command(tmp_path, capsys):
    project = import_project(tmp_path)
    assert main(["groups", str(project)]) == 0
    out = capsys.readouterr().out
    assert "Группа 1" in out
    assert "Группа 2" in out


def test_dynamics_command(tmp_path):
    project = import_project(tmp_path)
    output = tmp_path / "dynamics.csv"
    assert main(["dynamics", str(project), "-o", str(output)]) == 0

    df = pd.read_csv(output, index_col='Cycle')
    assert list(df.columns) == ["1", "2", "3"]
    assert df["3"].isna().all()


def test_info_command(tmp_path, capsys):
    project = import_project(tmp_path)
    assert main(["info", str(project)]) == 0
    assert "Object 1" in capsys.readouterr().out


def test_missing_project(tmp_path):
    assert main(["info", str(tmp_path / "absent.json")]) == 1
    assert main(["report", str(tmp_path / "absent.json")]) == 1


def test_unknown_cycle(tmp_path):
    project = import_project(tmp_path)
    assert main(["report", str(project), "--cycle", "9"]) == 1


def test_no_command():
    assert main([]) == 1
