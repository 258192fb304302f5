"""
Project Management Module

Handles saving and loading settlement monitoring projects.
Projects are stored as indented UTF-8 JSON using the field names of the
desktop application's .osd files, so files are interchangeable.
"""
import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from .models import ProjectData, MeasurementRow, CoordRow
from ..engine.errors import ProjectFormatError

logger = logging.getLogger(__name__)

PROJECT_SUFFIXES = (".osd", ".json")


def _finite_or_none(value: float) -> Optional[float]:
    """JSON has no NaN; absent coordinates are written as null."""
    if value is None or not math.isfinite(value):
        return None
    return value


def _float_or_nan(value: Any) -> float:
    return math.nan if value is None else float(value)


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def row_to_dict(row: MeasurementRow) -> Dict[str, Any]:
    """Serialize a measurement row."""
    return {
        'Id': row.id,
        'MarkRaw': row.mark_raw,
        'SettlRaw': row.settl_raw,
        'TotalRaw': row.total_raw,
        'Mark': _finite_or_none(row.mark),
        'Settl': _finite_or_none(row.settl),
        'Total': _finite_or_none(row.total),
        'Cycle': row.cycle,
    }


def row_from_dict(data: Dict[str, Any]) -> MeasurementRow:
    """Deserialize a measurement row."""
    return MeasurementRow(
        id=str(data.get('Id') or ""),
        mark=_optional_float(data.get('Mark')),
        settl=_optional_float(data.get('Settl')),
        total=_optional_float(data.get('Total')),
        mark_raw=data.get('MarkRaw') or "",
        settl_raw=data.get('SettlRaw') or "",
        total_raw=data.get('TotalRaw') or "",
        cycle=int(data.get('Cycle') or 0),
    )


def coord_to_dict(coord: CoordRow) -> Dict[str, Any]:
    """Serialize a coordinate row."""
    return {
        'Id': coord.id,
        'X': _finite_or_none(coord.x),
        'Y': _finite_or_none(coord.y),
    }


def coord_from_dict(data: Dict[str, Any]) -> CoordRow:
    """Deserialize a coordinate row."""
    return CoordRow(
        x=_float_or_nan(data.get('X')),
        y=_float_or_nan(data.get('Y')),
        id=str(data.get('Id') or ""),
    )


class ProjectManager:
    """
    Manages settlement monitoring projects.

    Features:
    - Save/Load projects as JSON
    - Lossless round trip of rows, coordinates and limits
    - Listing of projects in a base directory
    """

    def __init__(self, base_path: Optional[str] = None):
        """
        Initialize project manager.

        Args:
            base_path: Base directory for storing projects
        """
        self.base_path = Path(base_path) if base_path else Path.cwd() / "projects"

    def save_project(self, project: ProjectData, filepath: Optional[str] = None) -> str:
        """
        Save a project to disk.

        Args:
            project: ProjectData to save
            filepath: Target path (defaults to project.project_path, then
                base_path/project.osd)

        Returns:
            Path to saved file

        Raises:
            ValueError: If the file extension is not .osd or .json
        """
        path = Path(filepath or project.project_path or self.base_path / "project.osd")
        if path.suffix.lower() not in PROJECT_SUFFIXES:
            raise ValueError(f"Unsupported project format: {path.suffix or path.name}")
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.to_dict(project)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to save project to {path}: {e}")
            raise

        project.project_path = str(path)
        logger.info(f"Project saved to {path}")
        return str(path)

    def load_project(self, filepath: str) -> ProjectData:
        """
        Load a project from disk.

        Args:
            filepath: Path to project file

        Returns:
            Loaded ProjectData

        Raises:
            FileNotFoundError: If the file does not exist
            ProjectFormatError: If the file is not a valid project
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Project file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ProjectFormatError(f"Invalid project file {path}: {e}") from e

        project = self.from_dict(data)
        project.project_path = str(path)
        logger.info(
            f"Project loaded from {path}: {len(project.objects)} objects, "
            f"{len(project.data_rows)} rows"
        )
        return project

    def to_dict(self, project: ProjectData) -> Dict[str, Any]:
        """Serialize a project to a JSON-compatible dictionary."""
        data = {
            'Cycle': project.cycle,
            'MaxNomen': project.max_nomen,
            'MaxCalculated': project.max_calculated,
            'RelNomen': project.rel_nomen,
            'RelCalculated': project.rel_calculated,
            'SelectedCycleHeader': project.selected_cycle_header,
            'DataRows': [row_to_dict(r) for r in project.data_rows],
            'CoordRows': [coord_to_dict(c) for c in project.coord_rows],
            'Objects': {
                str(obj): {
                    str(cycle): [row_to_dict(r) for r in rows]
                    for cycle, rows in sorted(cycles.items())
                }
                for obj, cycles in sorted(project.objects.items())
            },
            'CycleLabels': {str(c): label for c, label in sorted(project.cycle_labels.items())},
        }
        if project.dwg_path:
            data['DwgPath'] = project.dwg_path
        return data

    def from_dict(self, data: Any) -> ProjectData:
        """
        Deserialize a project.

        Raises:
            ProjectFormatError: On unexpected structure
        """
        if not isinstance(data, dict):
            raise ProjectFormatError("Project root must be a JSON object")

        try:
            objects = {
                int(obj): {
                    int(cycle): [row_from_dict(r) for r in rows]
                    for cycle, rows in (cycles or {}).items()
                }
                for obj, cycles in (data.get('Objects') or {}).items()
            }
            return ProjectData(
                cycle=int(data.get('Cycle') or 1),
                max_nomen=_optional_float(data.get('MaxNomen')),
                max_calculated=_optional_float(data.get('MaxCalculated')),
                rel_nomen=_optional_float(data.get('RelNomen')),
                rel_calculated=_optional_float(data.get('RelCalculated')),
                selected_cycle_header=data.get('SelectedCycleHeader'),
                data_rows=[row_from_dict(r) for r in data.get('DataRows') or []],
                coord_rows=[coord_from_dict(c) for c in data.get('CoordRows') or []],
                objects=objects,
                cycle_labels={
                    int(c): str(label) for c, label in (data.get('CycleLabels') or {}).items()
                },
                dwg_path=data.get('DwgPath'),
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise ProjectFormatError(f"Invalid project structure: {e}") from e

    def list_projects(self) -> List[Dict[str, Any]]:
        """
        List all projects in the base directory.

        Returns:
            List of dictionaries with project metadata
        """
        projects = []
        if not self.base_path.exists():
            return projects

        for file in sorted(self.base_path.iterdir()):
            if file.suffix not in PROJECT_SUFFIXES:
                continue
            try:
                with open(file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                objects = data.get('Objects') or {}
                projects.append({
                    'name': file.stem,
                    'path': str(file),
                    'num_objects': len(objects),
                    'num_cycles': sum(len(c or {}) for c in objects.values()),
                })
            except (OSError, ValueError, AttributeError) as e:
                logger.warning(f"Failed to read project {file}: {e}")

        return projects
