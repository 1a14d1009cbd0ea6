import time
from dataclasses import dataclass
from typing import IO
from zoneinfo import ZoneInfo

from rich.console import Console, RenderableType
from rich.progress import (
    Progress, SpinnerColumn, TextColumn, BarColumn, TaskID, TaskProgressColumn,
    TimeElapsedColumn, TimeRemainingColumn,
)
from rich.style import Style
from rich.table import Column

from .config import ConsoleConfig, ConsoleMode
from .dataclasses import ContentItem
from .themes import GLDarkTheme
from .utils import apply_style


@dataclass
class _ProgressTask:
    task_id: TaskID
    total: float | None


class GLConsole:
    """
    Process-wide console used for every piece of human-readable output.

    The console is a singleton: the first ``GLConsole(cfg)`` call configures
    it and later ``GLConsole()`` calls return the same instance. Passing a
    different config to an existing console rebuilds it (with a warning on
    the old one), which is how the entry point applies CLI flags and how
    tests switch to NULL mode.

    Text messages are suppressed in SILENT and NULL mode; progress bars
    only exist in NORMAL and SILENT mode.

    :ivar _console: The underlying rich console.
    :vartype _console: Console | None
    :ivar _cfg: Active configuration.
    :vartype _cfg: ConsoleConfig | None
    :ivar _progress: Live progress display while any task is running.
    :vartype _progress: Progress | None
    :ivar _tasks: Running progress tasks by name.
    :vartype _tasks: dict[str, _ProgressTask]
    """
    _instance = None
    _console: Console | None = None
    _cfg: ConsoleConfig | None = None
    _log_handle: IO | None = None
    _progress: Progress | None = None
    _tasks: dict = {}
    _tz: ZoneInfo | None = None

    def __new__(cls, cfg: ConsoleConfig | None = None):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._initialize(cfg)
            cls._instance = instance
        elif cfg is not None and cfg != cls._instance._cfg:
            cls._instance.print_warning("GLConsole reconfigured; previous settings discarded.")
            cls._instance._initialize(cfg)
        return cls._instance

    def _initialize(self, cfg: ConsoleConfig | None = None):
        """
        Build the rich console for ``cfg.mode``.

        :raises ValueError: LOGGING mode without ``log_file``.
        :raises RuntimeError: The log file cannot be opened.
        """
        self._close_log()
        self._progress = None
        self._tasks = {}
        cfg = cfg if cfg is not None else ConsoleConfig()
        self._cfg = cfg
        self._tz = ZoneInfo(cfg.timezone) if cfg.timezone else None

        if cfg.mode is ConsoleMode.NULL:
            self._console = Console(quiet=True)
        elif cfg.mode is ConsoleMode.LOGGING:
            self._console = Console(file=self._open_log(cfg.log_file), theme=GLDarkTheme(),
                                    force_terminal=False, no_color=True, highlight=False)
        else:
            colorless = not cfg.use_colors or cfg.color_system is None
            self._console = Console(
                theme=GLDarkTheme(),
                no_color=colorless,
                color_system=None if colorless else cfg.color_system.value,
                highlight=False,
            )

    def _open_log(self, path: str | None) -> IO:
        if not path:
            raise ValueError("ConsoleConfig.log_file is required in LOGGING mode")
        try:
            self._log_handle = open(path, "a", encoding="utf-8")
        except OSError as e:
            raise RuntimeError(f"Cannot open console log file {path}: {e}") from e
        return self._log_handle

    def _close_log(self):
        if self._log_handle is not None:
            self._log_handle.close()
            self._log_handle = None

    @property
    def _messages_on(self) -> bool:
        return self._cfg.mode in (ConsoleMode.NORMAL, ConsoleMode.LOGGING)

    @property
    def _progress_on(self) -> bool:
        return self._cfg.mode in (ConsoleMode.NORMAL, ConsoleMode.SILENT)

    def handle_exception(self, show_locals: bool = False):
        self._console.print_exception(show_locals=show_locals)

    # --- Messages ---

    def print(self, content: str | ContentItem | RenderableType = "", style: str | Style = ""):
        """
        Print a string, a prepared ContentItem or any Rich renderable.

        Strings get a timestamp (when ``show_time`` is on); renderables such
        as tables and columns are printed unchanged.
        """
        if isinstance(content, ContentItem):
            item = content
        elif isinstance(content, str):
            item = ContentItem(type="text", content=content, style=style or None, time=time.time())
        else:
            item = ContentItem(type="renderable", renderable=content)
        self._emit(item)

    def print_notification(self, content: str):
        self._emit(ContentItem(type="notification", content=content, time=time.time()))

    def print_warning(self, content: str):
        self._emit(ContentItem(type="warning", content=content, time=time.time()))

    def print_error(self, content: str):
        self._emit(ContentItem(type="error", content=content, time=time.time()))

    def print_complete(self, content: str):
        self._emit(ContentItem(type="complete", content=content, time=time.time()))

    def section(self, content: str):
        """Figlet banner in the theme gradient."""
        self._emit(ContentItem(type="section", content=content))

    def rule(self, content: str, style: str | Style = ""):
        if self._messages_on:
            self._console.rule(apply_style(content, 'rule.text'), style=style or "rule.line")

    def _emit(self, item: ContentItem):
        if not self._messages_on:
            return
        self._console.print(item.renderable if item.is_renderable else str(item))

    # --- Progress ---

    def progress_start(self):
        if not self._progress_on or self._progress is not None:
            return
        self._progress = Progress(
            SpinnerColumn(table_column=Column(max_width=3)),
            TextColumn("[progress.description]{task.description}",
                       table_column=Column(min_width=15, max_width=60)),
            BarColumn(bar_width=None),
            TaskProgressColumn(table_column=Column(max_width=10)),
            TimeElapsedColumn(table_column=Column(max_width=12)),
            TimeRemainingColumn(table_column=Column(max_width=12)),
            console=self._console,
            transient=True,
            expand=True,
        )
        self._progress.start()

    def progress_stop(self):
        if self._progress is None:
            return
        self._progress.stop()
        self._progress = None
        self._tasks = {}

    def create_progress_task(self, task_name: str, task_desc: str, total: float | None = None, **kwargs):
        """
        Add a named task to the progress display, starting it if needed.

        :param task_name: Key used by the update/remove calls.
        :param task_desc: Markup shown beside the bar.
        :param total: Number of steps, or None for an indeterminate bar.
        """
        if not self._progress_on:
            return
        self.progress_start()
        task_id = self._progress.add_task(task_desc, total=total, **kwargs)
        self._tasks[task_name] = _ProgressTask(task_id, total)

    def update_progress_task(self, task_name: str, completed: float | None = None, **kwargs) -> bool:
        """Set ``completed`` or pass ``advance=n``. False when no such task runs."""
        task = self._tasks.get(task_name)
        if task is None or self._progress is None:
            return False
        self._progress.update(task.task_id, completed=completed, **kwargs)
        return True

    def remove_progress_task(self, task_name: str) -> bool:
        task = self._tasks.pop(task_name, None)
        if task is None or self._progress is None:
            return False
        if task.total is not None:
            self._progress.update(task.task_id, completed=task.total)
        self._progress.remove_task(task.task_id)
        return True

    def has_progress_task(self, task_name: str) -> bool:
        return task_name in self._tasks

    # --- Accessors ---

    def get_console_config(self) -> ConsoleConfig:
        return self._cfg

    def get_tz_info(self) -> ZoneInfo | None:
        return self._tz

    @property
    def width(self) -> int:
        return self._console.width if self._console is not None else 80
