"""
Command Loop

The line interface in front of the ledger. It reads one command at a
time, resolves the logged-in user and hands the work to the services:

- register / login / logout / whoami  → AuthService
- income / expense / budget           → LedgerOperations
- stats ...                           → AggregationEngine + StatsReporter
- statsout ...                        → StatsReporter destination

DESIGN DECISION: Commands are processed strictly one at a time, which
is what lets the ledger core run without locks.

Results from the services are printed verbatim. Nothing is swallowed:
errors and warnings reach the user as they were produced.
"""

import sys
from typing import Callable, Optional, TextIO

from finance_ledger.ledger import LedgerOperations
from finance_ledger.logs import get_logger
from finance_ledger.models.ledger import TransactionKind, User
from finance_ledger.queries import AggregationEngine
from finance_ledger.reporting import StatsFormatter, StatsReporter
from finance_ledger.services.auth import AuthService
from finance_ledger.services.registry import UserRegistry
from finance_ledger.services.storage import StorageError, UserStorageInterface


logger = get_logger(__name__)

HELP_TEXT = """\
Auth:
  register <login> <password>
  login <login> <password>
  logout
  whoami

Finance (login required):
  income <category> <amount> [comment...]
  expense <category> <amount> [comment...]
  budget <category> <limit>
  stats
  stats income
  stats expense
  stats categories <income|expense> <cat1,cat2,...>

Stats output (ONLY affects stats):
  statsout                Show current stats output
  statsout console        Print stats to console
  statsout file [path]    Append stats to file (default: {default_file})

Other:
  help
  exit"""

STATS_USAGE = """\
Usage:
  stats
  stats income
  stats expense
  stats categories <income|expense> <cat1,cat2,...>"""

STATSOUT_USAGE = """\
Usage:
  statsout
  statsout console
  statsout file [path]"""

KINDS = {kind.value: kind for kind in TransactionKind}


class CommandLoop:
    """
    Interactive session over a pair of text streams.

    Loads users from storage on start and saves them on exit or end of
    input.
    """

    def __init__(
        self,
        registry: UserRegistry,
        storage: UserStorageInterface,
        reporter: StatsReporter,
        auth: Optional[AuthService] = None,
        operations: Optional[LedgerOperations] = None,
        aggregation: Optional[AggregationEngine] = None,
        formatter: Optional[StatsFormatter] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self._registry = registry
        self._storage = storage
        self._reporter = reporter
        self._auth = auth or AuthService(registry)
        self._aggregation = aggregation or AggregationEngine()
        self._operations = operations or LedgerOperations(aggregation=self._aggregation)
        self._formatter = formatter or StatsFormatter()
        self._in = stdin or sys.stdin
        self._out = stdout or sys.stdout

        self._handlers: dict[str, Callable[[list[str]], bool]] = {
            "help": self._handle_help,
            "exit": self._handle_exit,
            "register": self._handle_register,
            "login": self._handle_login,
            "logout": self._handle_logout,
            "whoami": self._handle_whoami,
            "statsout": self._handle_statsout,
            "income": self._requires_login(self._handle_income),
            "expense": self._requires_login(self._handle_expense),
            "budget": self._requires_login(self._handle_budget),
            "stats": self._requires_login(self._handle_stats),
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _print(self, text: str = "") -> None:
        self._out.write(text + "\n")

    def load(self) -> None:
        """Seed the registry from storage; start empty if that fails."""
        try:
            users = self._storage.load_users()
        except StorageError as e:
            logger.error("load_failed", error=str(e))
            self._print("WARNING: failed to load data file. Starting with empty storage.")
            self._print(f"Reason: {type(e).__name__}: {e}")
            users = {}
        self._registry.replace_all(users)

    def save(self) -> bool:
        try:
            self._storage.save_users(self._registry.snapshot())
        except StorageError as e:
            self._print("ERROR: failed to save data.")
            self._print(f"Reason: {type(e).__name__}: {e}")
            return False
        return True

    def prompt(self) -> str:
        user = self._auth.current_user
        return f"{user.login}> " if user else "> "

    def run(self) -> None:
        """
        Load, process commands until `exit` or end of input, then save.

        Data is saved even when a command raises or the loop is
        interrupted; the exception then propagates.
        """
        self.load()

        self._print("Personal Finance Manager (CLI)")
        self._print("Type 'help' to see commands.")

        try:
            while True:
                self._out.write(self.prompt())
                self._out.flush()

                line = self._in.readline()
                if not line:
                    self._print()
                    break

                line = line.strip()
                if not line:
                    continue

                if not self.handle(line):
                    break
        finally:
            self.save()
        self._print("Bye!")

    def handle(self, line: str) -> bool:
        """
        Execute one command line.

        Returns False when the session should end.
        """
        parts = line.split()
        command = parts[0].lower()

        handler = self._handlers.get(command)
        if handler is None:
            self._print(f"Unknown command: {command}. Type 'help'.")
            return True

        logger.debug("command_received", command=command)
        return handler(parts)

    def _requires_login(
        self,
        handler: Callable[[User, list[str]], bool],
    ) -> Callable[[list[str]], bool]:
        def guarded(parts: list[str]) -> bool:
            user = self._auth.current_user
            if user is None:
                self._print("Please login first.")
                return True
            return handler(user, parts)
        return guarded

    # ------------------------------------------------------------------
    # Session commands
    # ------------------------------------------------------------------

    def _handle_help(self, parts: list[str]) -> bool:
        self._print(HELP_TEXT.format(default_file=self._reporter.default_file))
        return True

    def _handle_exit(self, parts: list[str]) -> bool:
        return False

    def _handle_register(self, parts: list[str]) -> bool:
        if len(parts) < 3:
            self._print("Usage: register <login> <password>")
            return True
        self._print(self._auth.register(parts[1], parts[2]).text)
        return True

    def _handle_login(self, parts: list[str]) -> bool:
        if len(parts) < 3:
            self._print("Usage: login <login> <password>")
            return True
        self._print(self._auth.login(parts[1], parts[2]).text)
        return True

    def _handle_logout(self, parts: list[str]) -> bool:
        self._auth.logout()
        self._print("Logged out.")
        return True

    def _handle_whoami(self, parts: list[str]) -> bool:
        user = self._auth.current_user
        if user is None:
            self._print("You are not logged in.")
        else:
            self._print(f"You are logged in as: {user.login}")
        return True

    def _handle_statsout(self, parts: list[str]) -> bool:
        if len(parts) == 1:
            self._print(f"Stats output: {self._reporter.describe()}")
            return True

        mode = parts[1].lower()
        if mode == "console":
            self._reporter.use_console()
            self._print("Stats output switched to console.")
        elif mode == "file":
            self._reporter.use_file(parts[2] if len(parts) >= 3 else None)
            self._print(f"Stats output switched to file: {self._reporter.file_path}")
        else:
            self._print(STATSOUT_USAGE)
        return True

    # ------------------------------------------------------------------
    # Finance commands
    # ------------------------------------------------------------------

    def _handle_income(self, user: User, parts: list[str]) -> bool:
        if len(parts) < 3:
            self._print("Usage: income <category> <amount> [comment...]")
            return True
        result = self._operations.add_income(user, parts[1], parts[2], " ".join(parts[3:]))
        self._print(result.text)
        return True

    def _handle_expense(self, user: User, parts: list[str]) -> bool:
        if len(parts) < 3:
            self._print("Usage: expense <category> <amount> [comment...]")
            return True
        result = self._operations.add_expense(user, parts[1], parts[2], " ".join(parts[3:]))
        self._print(result.text)
        return True

    def _handle_budget(self, user: User, parts: list[str]) -> bool:
        if len(parts) < 3:
            self._print("Usage: budget <category> <limit>")
            return True
        self._print(self._operations.set_budget(user, parts[1], parts[2]).text)
        return True

    def _handle_stats(self, user: User, parts: list[str]) -> bool:
        if len(parts) == 1:
            report = self._aggregation.build_stats(user)
            self._reporter.emit(self._formatter.full_stats(report))
            return True

        if len(parts) == 2 and parts[1].lower() in KINDS:
            kind = KINDS[parts[1].lower()]
            report = self._aggregation.build_stats(user)
            self._reporter.emit(self._formatter.category_sums(report, kind))
            return True

        if len(parts) >= 4 and parts[1].lower() == "categories":
            kind = KINDS.get(parts[2].lower())
            if kind is None:
                self._print("Usage: stats categories <income|expense> <cat1,cat2,...>")
                return True

            categories = [name.strip() for name in parts[3].split(",")]
            categories = [name for name in categories if name]
            if not categories:
                self._print("No categories provided.")
                return True

            result = self._aggregation.sum_by_categories(user, kind, categories)
            self._reporter.emit(self._formatter.category_query(result))
            return True

        self._print(STATS_USAGE)
        return True
