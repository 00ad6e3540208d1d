"""Main entry point for the Workload Timeline engine."""

import argparse
import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

from workload_timeline.engine.capacity import build_flexibility_cache, sort_by_risk
from workload_timeline.engine.scene_builder import SceneBuilder
from workload_timeline.engine.schedule import WeeklySchedule, WorkingTime
from workload_timeline.engine.workload import capacity_by_zoom, daily_capacity, summarize_workload
from workload_timeline.models.task import Task
from workload_timeline.sample.generator import TaskGenerator
from workload_timeline.utils.config import load_merged_config
from workload_timeline.utils.datetime_utils import parse_date

logger = logging.getLogger(__name__)


def load_tasks(tasks_path: Optional[str], config: dict, today: date) -> List[Task]:
    """Read tracker-style task records from JSON, or generate a sample set."""
    if not tasks_path:
        return TaskGenerator(seed=42, config=config).generate_tasks(start_date=today)

    with open(tasks_path, 'r') as f:
        data = json.load(f)
    # Accept both a bare list and a tracker response wrapping it in "issues"
    records = data.get('issues', []) if isinstance(data, dict) else data
    return [Task.from_dict(record) for record in records]


def run_render(config: dict, tasks: List[Task], today: date, zoom: Optional[str]):
    """Build one scene, print it and save it as JSON."""
    working_time = WorkingTime(WeeklySchedule.from_config(config))
    builder = SceneBuilder(working_time, config)
    timeline = builder.timeline_for(tasks, zoom, today)
    scene = builder.build(tasks, timeline, today)

    print(scene.to_human_readable())

    scores = build_flexibility_cache(tasks, working_time, today)
    print("\nBy risk:")
    for task in sort_by_risk(tasks, scores):
        score = scores[task.task_id]
        if score is None:
            print(f"  #{task.task_id} {task.title}: no data")
        else:
            print(f"  #{task.task_id} {task.title}: {score.status.value} "
                  f"(initial {score.initial}%, remaining {score.remaining}%)")

    results_dir = Path("results")
    results_dir.mkdir(exist_ok=True)
    scene_path = results_dir / "scene.json"
    with open(scene_path, 'w') as f:
        json.dump(scene.to_dict(), f, indent=2, default=str)

    print(f"\nScene saved to: {scene_path}")
    return scene


def run_heatmap(config: dict, tasks: List[Task], today: date, zoom: Optional[str]):
    """Print per-period capacity and the weekly workload summary."""
    working_time = WorkingTime(WeeklySchedule.from_config(config))
    builder = SceneBuilder(working_time, config)
    timeline = builder.timeline_for(tasks, zoom, today)
    zoom_name = timeline.zoom.value

    days = daily_capacity(tasks, working_time, timeline.min_date, timeline.max_date)
    periods = capacity_by_zoom(days, zoom_name)

    print(f"\n=== Capacity by {zoom_name} ===")
    for period in periods:
        print(f"  {period.start} .. {period.end}: {period.load_hours:.1f}h / "
              f"{period.capacity_hours:.1f}h ({period.percentage}%) {period.status.value}")

    workload = builder.aggregator.aggregate(tasks, timeline.min_date, timeline.max_date)
    bands = builder.aggregator.bands_for(workload)
    print("\n=== Daily utilisation ===")
    for day, value in workload.items():
        if value > 0:
            print(f"  {day} {day.strftime('%a')}: {value * 100:5.0f}% {bands[day].value}")

    summary = summarize_workload(tasks, working_time, today)
    print("\n=== This week ===")
    print(f"  Remaining work: {summary.remaining:.1f}h")
    print(f"  Available until Friday: {summary.available_this_week:.1f}h")
    print(f"  Buffer: {summary.buffer:+.1f}h")
    for urgent in summary.top_urgent:
        print(f"  #{urgent.task_id} {urgent.title}: {urgent.days_left} days, {urgent.hours_left:.1f}h left")

    return periods, summary


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Workload Timeline engine"
    )
    parser.add_argument(
        'command',
        choices=['render', 'heatmap', 'generate-tasks'],
        help='Command to run'
    )
    parser.add_argument(
        '--config',
        type=str,
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '--tasks',
        type=str,
        default=None,
        help='JSON file with tracker issues (default: generated sample)'
    )
    parser.add_argument(
        '--zoom',
        type=str,
        choices=['day', 'week', 'month', 'quarter', 'year'],
        default=None,
        help='Zoom level (default: from config)'
    )
    parser.add_argument(
        '--today',
        type=str,
        default=None,
        help='Reference date as YYYY-MM-DD (default: today)'
    )

    args = parser.parse_args()

    config = load_merged_config(args.config)
    logging.basicConfig(
        level=config.get('logging', {}).get('level', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    today = parse_date(args.today) or date.today()
    tasks = load_tasks(args.tasks, config, today)
    logger.info("Loaded %d tasks", len(tasks))

    if args.command == 'render':
        run_render(config, tasks, today, args.zoom)
    elif args.command == 'heatmap':
        run_heatmap(config, tasks, today, args.zoom)
    elif args.command == 'generate-tasks':
        results_dir = Path("results")
        results_dir.mkdir(exist_ok=True)

        with open(results_dir / "generated_tasks.json", 'w') as f:
            json.dump({'issues': [t.to_dict() for t in tasks]}, f, indent=2)

        print(f"Generated {len(tasks)} tasks")
        print(f"Tasks saved to: results/generated_tasks.json")


if __name__ == "__main__":
    main()
