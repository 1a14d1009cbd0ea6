"""Command-line plumbing shared by experiment entry points.

GLArgumentParser prints help and errors through GLConsole; the
``add_*_args`` helpers register the flag groups every experiment
accepts, and the ``*_from_args`` / ``build_sinks`` helpers turn the
parsed flags into a console configuration and metric sinks.
"""

import argparse
from dataclasses import asdict
from datetime import datetime

from rich.table import Table

from .console import GLConsole, ConsoleConfig, ConsoleMode
from .sinks import ConsoleSink, CSVSink, JSONLSink, MetricSink, WandbSink


def _flag_text(action: argparse.Action) -> str:
    text = ', '.join(action.option_strings) or action.dest
    if action.choices:
        return f"{text} {{{','.join(map(str, action.choices))}}}"
    if action.metavar:
        return f"{text} {action.metavar}"
    if action.type is not None:
        return f"{text} {action.type.__name__.upper()}"
    return text


class GLArgumentParser(argparse.ArgumentParser):
    """ArgumentParser rendering through GLConsole.

    ``--help`` prints one styled table per argument group and exits 0;
    parse errors print a single error line and exit 1.
    """

    def __init__(self, experiment_name=None, **kwargs):
        kwargs['add_help'] = False
        super().__init__(**kwargs)
        self.experiment_name = experiment_name
        self.add_argument('-h', '--help', action='help', default=argparse.SUPPRESS,
                          help='Show this help message and exit')

    @staticmethod
    def _console():
        # Runs before the entry point has configured the console from flags.
        return GLConsole(ConsoleConfig(mode=ConsoleMode.NORMAL, show_time=False))

    def error(self, message):
        self._console().print_error(message)
        raise SystemExit(1)

    def exit(self, status=0, message=None):
        if message:
            console = self._console()
            if status:
                console.print_error(message.strip())
            else:
                console.print(message.strip())
        raise SystemExit(status)

    def print_usage(self, file=None):
        pass

    def print_help(self, file=None):
        console = self._console()
        console.rule(self.experiment_name or 'ganloop')
        if self.description:
            console.print(f"  {self.description}")
        console.print()
        for group in self._action_groups:
            actions = [a for a in group._group_actions if not isinstance(a, argparse._HelpAction)]
            if not actions or group.title == 'positional arguments':
                continue
            title = 'Experiment Options' if group.title == 'options' else group.title
            table = Table(box=None, show_header=False, padding=(0, 2), pad_edge=False)
            table.add_column(no_wrap=True)
            table.add_column()
            for action in actions:
                table.add_row(f"    [metric.value]{_flag_text(action)}[/metric.value]",
                              f"[detail]{action.help or ''}[/detail]")
            console.print(f"  [bold]{title.upper()}[/bold]")
            console.print(table)
            console.print()


def add_common_args(parser, defaults=None):
    """Add the flags every experiment accepts.

    Args:
        parser: The argparse parser.
        defaults: Optional config instance whose fields supply the defaults.
    """
    base = defaults if defaults is not None else object()
    seed = getattr(base, 'seed', 42)
    log_every = getattr(base, 'log_every', 50)
    sample_every = getattr(base, 'sample_every', 1)

    group = parser.add_argument_group('Common Options')
    group.add_argument('--seed', type=int, default=seed, help=f"Random seed (default: {seed})")
    group.add_argument('--output-dir', type=str, default=getattr(base, 'output_dir', 'output'),
                       help='Root directory for run outputs')
    group.add_argument('--log-every', type=int, default=log_every,
                       help=f"Print running losses every N iterations (default: {log_every})")
    group.add_argument('--sample-every', type=int, default=sample_every,
                       help=f"Sample the generator every N epochs (default: {sample_every})")
    group.add_argument('--silent', action='store_true',
                       help='Keep the progress bar, hide every other message')
    group.add_argument('--no-console-output', action='store_true',
                       help='Print nothing at all')
    group.add_argument('--log-file', type=str, default=None, metavar='PATH',
                       help='Append console output to PATH instead of the terminal')
    group.add_argument('--no-determinism', action='store_true',
                       help='Allow non-deterministic torch kernels (seeds are still set)')


def add_sink_args(parser):
    """Add flags selecting extra metric sinks."""
    group = parser.add_argument_group('Metric Options')
    group.add_argument('--metrics-csv', action='store_true',
                       help='Also write loss records to <output-dir>/<experiment>/<run>.csv')
    group.add_argument('--metrics-jsonl', action='store_true',
                       help='Also write loss records to <output-dir>/<experiment>/<run>.jsonl')
    group.add_argument('--wandb', type=str, default=None, metavar='PROJECT',
                       help='Also log to Weights & Biases under PROJECT')


def console_config_from_args(args) -> ConsoleConfig:
    """Console mode by precedence: --no-console-output, --silent, --log-file, terminal."""
    if getattr(args, 'no_console_output', False):
        return ConsoleConfig(mode=ConsoleMode.NULL)
    if getattr(args, 'silent', False):
        return ConsoleConfig(mode=ConsoleMode.SILENT)
    if getattr(args, 'log_file', None):
        return ConsoleConfig(mode=ConsoleMode.LOGGING, log_file=args.log_file)
    return ConsoleConfig(mode=ConsoleMode.NORMAL)


def build_sinks(args, config) -> list[MetricSink]:
    """ConsoleSink plus whatever file or W&B sinks the flags ask for."""
    sinks: list[MetricSink] = [ConsoleSink()]
    placement = dict(output_dir=config.output_dir, experiment_name=config.experiment_name)
    if getattr(args, 'metrics_csv', False):
        sinks.append(CSVSink(**placement))
    if getattr(args, 'metrics_jsonl', False):
        sinks.append(JSONLSink(**placement))
    if getattr(args, 'wandb', None):
        sinks.append(WandbSink(
            project=args.wandb,
            group=f"{config.experiment_name}-{datetime.now():%Y%m%d_%H%M%S}",
            config=asdict(config),
        ))
    return sinks
