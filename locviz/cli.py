"""CLI entry point for locviz."""

import argparse
import logging
import sys
from pathlib import Path

from locviz.config import load_config
from locviz.errors import LocvizError
from locviz.explorer import CommitExplorer, VizContext
from locviz.models import SelectionRegion
from locviz.page import build_site
from locviz.scatter import selection_count_text
from locviz.scroller import ListStepNotifier, NarrativeScroller
from locviz.stats import summarize
from locviz.surface import ImageSurface
from locviz.theme import ThemeStore, parse_preference


def _parse_region(value: str) -> SelectionRegion:
    try:
        x0, y0, x1, y1 = (float(v) for v in value.split(","))
    except ValueError as e:
        raise argparse.ArgumentTypeError("expected x0,y0,x1,y1") from e
    return SelectionRegion(x0=x0, y0=y0, x1=x1, y1=y1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Commit history visualizer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-c", "--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--data", default=None, help="Commit log (path or URL), overrides config")
    sub = parser.add_subparsers(dest="command")

    # stats command
    sub.add_parser("stats", help="Show summary stats for the commit log")

    # build command
    build_parser = sub.add_parser("build", help="Write the meta page HTML")
    build_parser.add_argument("--output", type=Path, default=None, help="Output directory")
    build_parser.add_argument(
        "--local", action="store_true",
        help="Use the local base path for navigation links",
    )

    # snapshot command
    snap_parser = sub.add_parser("snapshot", help="Render the scatter plot to PNG")
    snap_parser.add_argument("--progress", type=float, default=None, help="Slider position (default: max)")
    snap_parser.add_argument("--brush", type=_parse_region, default=None, help="Brush region x0,y0,x1,y1")
    snap_parser.add_argument("--output", type=Path, default=Path("chart.png"), help="PNG output path")

    # walk command
    sub.add_parser("walk", help="Replay every narrative step through the scroller")

    # theme command
    theme_parser = sub.add_parser("theme", help="Show or set the theme preference")
    theme_parser.add_argument("value", nargs="?", help="light, dark or auto")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.data:
        config = config.model_copy(update={"data_path": args.data})

    try:
        if args.command == "stats":
            context = VizContext.load(config)
            stats = summarize(context.lines, context.commits)
            print(f"Total LOC: {stats.total_loc}")
            print(f"Total commits: {stats.total_commits}")
            print(f"Files: {stats.total_files}")
            if stats.longest_file:
                print(f"Longest file: {stats.longest_file.name} ({stats.longest_file.lines} lines)")
            print(f"Average file length: {stats.average_file_length:.1f}")
            print(f"Max depth: {stats.max_depth}")
            if stats.busiest_period:
                print(f"Time of day most work is done: {stats.busiest_period}")

        elif args.command == "build":
            path = build_site(config, output_dir=args.output, local=args.local)
            print(f"Output: {path}")

        elif args.command == "snapshot":
            context = VizContext.load(config)
            surface = ImageSurface(config.chart.width, config.chart.height)
            explorer = CommitExplorer(context, surface)
            explorer.initial_render()
            if args.progress is not None:
                explorer.set_progress(args.progress)
            if args.brush is not None:
                selected = explorer.brush(args.brush)
                print(selection_count_text(len(selected)))
            print(f"Commits until: {context.time_filter.cutoff_label()}")
            for share in explorer.breakdown.languages:
                print(f"  {share.language}: {share.lines} lines ({share.percent_label})")
            surface.save(args.output)
            print(f"Output: {args.output}")

        elif args.command == "walk":
            context = VizContext.load(config)
            explorer = CommitExplorer(context, surface=None)
            explorer.initial_render()
            scroller = NarrativeScroller(explorer)
            notifier = ListStepNotifier()
            scroller.bind(notifier)
            for step in scroller.steps:
                notifier.enter(step.index)
                view = context.view
                print(f"[{step.index + 1}/{len(scroller.steps)}] {context.time_filter.cutoff_label()}: "
                      f"{len(view.commits)} commits, {len(view.lines)} lines")

        elif args.command == "theme":
            store = ThemeStore(config.resolved_preferences_path)
            if args.value is None:
                print(store.load().value)
            else:
                pref = parse_preference(args.value)
                if pref is None:
                    parser.error(f"unknown theme {args.value!r} (expected light, dark or auto)")
                store.save(pref)
                print(pref.value)

        else:
            parser.print_help()
    except LocvizError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
