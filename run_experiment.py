"""Command-line entry point for registered experiments.

Usage:
    python run_experiment.py <experiment> [flags]
    python run_experiment.py --list

Examples:
    python run_experiment.py mnist_gan
    python run_experiment.py mnist_gan --epochs 2 --limit 2048 --save-samples
    python run_experiment.py mnist_gan --silent --metrics-csv
"""

import sys

from ganloop import ExperimentRegistry
from ganloop.console import GLConsole, ConsoleConfig, ConsoleMode
from ganloop.cli import (
    GLArgumentParser, add_common_args, add_sink_args,
    build_sinks, console_config_from_args,
)


def _terminal():
    return GLConsole(ConsoleConfig(mode=ConsoleMode.NORMAL, show_time=False))


def list_experiments():
    """Print each registered experiment with the first line of its docstring."""
    import experiments  # noqa: F401

    console = _terminal()
    console.print("\n[bold]Experiments:[/bold]")
    for name, runner_cls in sorted(ExperimentRegistry.get_all().items()):
        summary = (runner_cls.__doc__ or "").strip().partition('\n')[0]
        console.print(f"  [metric.value]{name:20s}[/metric.value]  [detail]{summary}[/detail]")
    console.print()


def print_usage():
    console = _terminal()
    console.print("\n  [bold]Usage:[/bold]")
    for tail in ("<experiment> [flags]", "<experiment> --help", "--list"):
        console.print(f"    [metric.value]python run_experiment.py[/metric.value] [detail]{tail}[/detail]")


def main(argv=None):
    argv = sys.argv[1:] if argv is None else list(argv)

    if '--list' in argv:
        list_experiments()
        return None

    if not argv or argv[0].startswith('-'):
        print_usage()
        list_experiments()
        sys.exit(0 if {'-h', '--help'} & set(argv) else 1)

    import experiments  # noqa: F401

    experiment_name, flags = argv[0], argv[1:]
    try:
        runner_cls = ExperimentRegistry.get(experiment_name)
    except ValueError as e:
        _terminal().print_error(str(e))
        sys.exit(1)

    parser = GLArgumentParser(
        experiment_name=experiment_name,
        description=(runner_cls.__doc__ or "").strip().partition('\n')[0],
    )
    add_common_args(parser, defaults=runner_cls.config_class())
    add_sink_args(parser)
    runner_cls.add_args(parser)
    args = parser.parse_args(flags)

    console = GLConsole(console_config_from_args(args))
    try:
        config = runner_cls.build_config(args)
    except ValueError as e:
        console.print_error(f"Invalid configuration: {e}")
        sys.exit(1)
    config.experiment_name = config.experiment_name or experiment_name

    runner = runner_cls.build_runner(config, args, sinks=build_sinks(args, config))
    try:
        return runner.run()
    except KeyboardInterrupt:
        console.progress_stop()
        console.print_warning("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
