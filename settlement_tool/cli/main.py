"""
Settlement Tool - Main Entry Point

Command-line interface for the settlement monitoring tool.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config.models import ProjectData
from ..config.project_manager import ProjectManager
from ..config.settings_manager import get_settings_manager
from ..engine import (
    ReportCalculator,
    align_coords_by_id,
    build_cycle_groups,
    build_dynamics,
    cycle_caption,
    parse_unit
)
from ..engine.errors import ImportFormatError, ProjectFormatError
from ..exporters import export_dynamics_csv, export_relative_csv, export_report_text
from ..parsers import read_coordinates_csv, read_measurements_csv
from ..validators import check_alignment, check_cycle_order, find_duplicate_ids


logger = logging.getLogger(__name__)


def load_project(filepath: str) -> Optional[ProjectData]:
    """
    Load a project file, logging failures.

    Args:
        filepath: Path to project JSON

    Returns:
        ProjectData or None if it could not be loaded
    """
    try:
        return ProjectManager().load_project(filepath)
    except FileNotFoundError as e:
        logger.error(str(e))
    except ProjectFormatError as e:
        logger.error(f"Cannot read project {filepath}: {e}")
    return None


def resolve_object(project: ProjectData, requested: Optional[int]) -> Optional[int]:
    """Requested object number, or the first one in the project."""
    if requested is not None:
        if requested not in project.objects:
            logger.error(f"Object {requested} not found in project")
            return None
        return requested
    if not project.objects:
        logger.error("Project has no objects")
        return None
    return min(project.objects)


def resolve_cycle(project: ProjectData, object_number: int, requested: Optional[int]) -> Optional[int]:
    """Requested cycle, the project's current cycle, or the last one."""
    cycles = project.get_cycles(object_number)
    if requested is not None:
        if requested not in cycles:
            logger.error(f"Cycle {requested} not found for object {object_number}")
            return None
        return requested
    if project.cycle in cycles:
        return project.cycle
    return max(cycles) if cycles else None


def print_report(bundle, caption: str):
    """Print General and Relative report summary."""
    general = bundle.general
    print("\n" + "=" * 80)
    print(f"SETTLEMENT REPORT - {caption}")
    print("=" * 80)

    print(f"\nActive marks: {len(bundle.rows)}")
    print(f"Total extrema:      {general.total_extrema}   {general.total_extrema_ids}")
    print(f"Settlement extrema: {general.settl_extrema}   {general.settl_extrema_ids}")
    print(f"Average total:      {general.avg_total if general.avg_total is not None else '-'}")
    print(f"Average settlement: {general.avg_settl if general.avg_settl is not None else '-'}")

    print(f"\nNo access: {', '.join(general.no_access_ids) or '-'}")
    print(f"New:       {', '.join(general.new_ids) or '-'}")
    print(f"Destroyed: {', '.join(general.destroyed_ids) or '-'}")

    print(f"\nTotal exceeds SP limit:   {bundle.exceed_total_sp_display or '-'}")
    print(f"Total exceeds calc limit: {bundle.exceed_total_calc_display or '-'}")

    relative = bundle.relative
    print(f"\nPairs: {len(relative.all_rows)}")
    print(f"Max relative: {relative.max_relative.value} ({', '.join(relative.max_relative.ids) or '-'})")
    print(f"Relative exceeds SP limit:   {bundle.exceed_rel_sp_display or '-'}")
    print(f"Relative exceeds calc limit: {bundle.exceed_rel_calc_display or '-'}")


def cmd_report(args) -> int:
    project = load_project(args.project)
    if project is None:
        return 1
    object_number = resolve_object(project, args.object)
    if object_number is None:
        return 1
    cycle = resolve_cycle(project, object_number, args.cycle)
    if cycle is None:
        return 1

    rows = project.get_rows(object_number, cycle)
    for point_id in find_duplicate_ids(rows):
        logger.warning(f"Mark '{point_id}' occurs more than once in cycle {cycle}")
    bundle = ReportCalculator().recalc(rows, project.coord_rows, project.limits)
    check_alignment(align_coords_by_id(bundle.rows, project.coord_rows), bundle.rows)

    caption = cycle_caption(cycle, project.cycle_labels)
    print_report(bundle, caption)

    if args.output:
        export_report_text(args.output, bundle.general, bundle.relative, caption)
        logger.info(f"Exported report to {args.output}")
    if args.pairs:
        export_relative_csv(args.pairs, bundle.relative)
    return 0


def cmd_groups(args) -> int:
    project = load_project(args.project)
    if project is None:
        return 1
    object_number = resolve_object(project, args.object)
    if object_number is None:
        return 1

    cycles = project.get_cycles(object_number)
    groups = build_cycle_groups(cycles)

    print(f"\nObject {object_number}: {len(cycles)} cycles, {len(groups)} groups")
    print("-" * 80)
    for group in groups:
        result = check_cycle_order(group.states)
        for warning in result.warnings:
            logger.warning(f"{group.display_name}: {warning}")

        print(f"\n{group.display_name} ({len(group.point_ids)} marks): {', '.join(group.point_ids)}")
        for meaning in group.meaning_groups:
            spans = ", ".join(
                f"{s.cycle_from}" if s.cycle_from == s.cycle_to else f"{s.cycle_from}-{s.cycle_to}"
                for s in meaning.segments
            )
            print(f"  {meaning.title}: cycles {spans}")
    return 0


def cmd_dynamics(args) -> int:
    project = load_project(args.project)
    if project is None:
        return 1
    object_number = resolve_object(project, args.object)
    if object_number is None:
        return 1

    series = build_dynamics(project.get_cycles(object_number))
    export_dynamics_csv(args.output, series)
    print(f"Exported {len(series)} series to {args.output}")
    return 0


def cmd_import(args) -> int:
    manager = get_settings_manager()
    unit = args.unit or manager.get_unit("coord_unit")
    try:
        objects = read_measurements_csv(args.file)
        coords = read_coordinates_csv(args.coords, parse_unit(unit)) if args.coords else []
    except (FileNotFoundError, ImportFormatError, ValueError) as e:
        logger.error(f"Import failed: {e}")
        return 1

    project = ProjectData(objects=objects, coord_rows=coords)
    defaults = manager.load_limits()
    if defaults is not None:
        project.max_nomen = defaults.max_nomen
        project.max_calculated = defaults.max_calculated
        project.rel_nomen = defaults.rel_nomen
        project.rel_calculated = defaults.rel_calculated
    if objects:
        first_object = min(objects)
        project.cycle = max(objects[first_object])
        project.data_rows = list(objects[first_object][project.cycle])

    try:
        path = ProjectManager().save_project(project, args.output)
    except ValueError as e:
        logger.error(str(e))
        return 1
    print(f"Project written to {path}")
    return 0


def cmd_info(args) -> int:
    project = load_project(args.project)
    if project is None:
        return 1

    print(f"\nProject: {Path(args.project).name}")
    print(f"Current cycle: {project.cycle}")
    print(f"Coordinates: {len(project.coord_rows)}")
    for object_number in sorted(project.objects):
        cycles = project.objects[object_number]
        print(f"\nObject {object_number}:")
        for cycle in sorted(cycles):
            print(f"  {cycle_caption(cycle, project.cycle_labels):<30}{len(cycles[cycle]):>6} marks")

    limits = project.limits
    print("\nLimits:")
    print(f"  Max total (SP):    {limits.max_nomen if limits.max_nomen is not None else '-'}")
    print(f"  Max total (calc):  {limits.max_calculated if limits.max_calculated is not None else '-'}")
    print(f"  Relative (SP):     {limits.rel_nomen if limits.rel_nomen is not None else '-'}")
    print(f"  Relative (calc):   {limits.rel_calculated if limits.rel_calculated is not None else '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="settlement-cli",
        description="Settlement Monitoring Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build a project from normalized tables
  settlement-cli import rows.csv --coords coords.csv --unit m -o site.json

  # Report for cycle 5 of object 1
  settlement-cli report site.json --object 1 --cycle 5 -o summary.txt

  # Export dynamics series
  settlement-cli dynamics site.json -o dynamics.csv
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    report_parser = subparsers.add_parser('report', help='General and relative report')
    report_parser.add_argument('project', help='Project file')
    report_parser.add_argument('--object', type=int, help='Object number')
    report_parser.add_argument('--cycle', type=int, help='Cycle number')
    report_parser.add_argument('-o', '--output', help='Text summary output path')
    report_parser.add_argument('--pairs', help='Relative pair table CSV output path')

    groups_parser = subparsers.add_parser('groups', help='Cycle state groups')
    groups_parser.add_argument('project', help='Project file')
    groups_parser.add_argument('--object', type=int, help='Object number')

    dynamics_parser = subparsers.add_parser('dynamics', help='Export dynamics series')
    dynamics_parser.add_argument('project', help='Project file')
    dynamics_parser.add_argument('--object', type=int, help='Object number')
    dynamics_parser.add_argument('-o', '--output', required=True, help='CSV output path')

    import_parser = subparsers.add_parser('import', help='Create a project from CSV')
    import_parser.add_argument('file', help='Measurement CSV (object, cycle, id, mark, settl, total)')
    import_parser.add_argument('-o', '--output', required=True, help='Project output path')
    import_parser.add_argument('--coords', help='Coordinate CSV (id, x, y)')
    import_parser.add_argument('--unit', help='Coordinate unit (mm, cm, dm, m); stored default if omitted')

    info_parser = subparsers.add_parser('info', help='Show project information')
    info_parser.add_argument('project', help='Project file')

    return parser


COMMANDS = {
    'report': cmd_report,
    'groups': cmd_groups,
    'dynamics': cmd_dynamics,
    'import': cmd_import,
    'info': cmd_info,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.command is None:
        parser.print_help()
        return 1

    return COMMANDS[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
