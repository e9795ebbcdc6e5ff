"""Command dispatch from parsed git command lines to simulator transitions."""

import shlex
from typing import Callable

import logbook
from PySide6.QtCore import QObject, Signal

from gitsim.models.config import SimulatorConfig
from gitsim.models.repository import Repository

from .simulator import CommandResult, GitSimulator, Prompt, SimulatorError
from .utils import generate_hash, safe_command

log = logbook.Logger(__name__)


def _internal_error(exc: Exception, engine: "CommandEngine", *args, **kwargs) -> CommandResult:
    verb = args[0] if args else kwargs.get("verb", "")
    verb_args = args[1] if len(args) > 1 else kwargs.get("args")
    result = CommandResult.error(f"fatal: internal simulator error: {exc}")
    result.command = engine._describe(verb, list(verb_args or []))
    engine.command_executed.emit(result)
    return result


class CommandEngine(QObject):
    """Parses git command lines and runs them against one Repository."""

    # Signals
    command_executed = Signal(object)  # CommandResult
    state_changed = Signal()

    def __init__(
        self,
        repository: Repository | None = None,
        config: SimulatorConfig | None = None,
        prompt: Prompt | None = None,
        hash_factory: Callable[[set[str]], str] = generate_hash,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.repository = repository or Repository.create(config)
        self.simulator = GitSimulator(
            self.repository, prompt=prompt, hash_factory=hash_factory
        )
        self._handlers: dict[str, Callable[[list[str]], CommandResult]] = {
            "init": lambda args: self.simulator.init(),
            "clone": self._clone,
            "status": lambda args: self.simulator.status(),
            "add": self._add,
            "commit": self._commit,
            "log": self._log,
            "branch": self._branch,
            "checkout": self._checkout,
            "merge": self._merge,
            "push": self._push,
            "pull": lambda args: self.simulator.pull(),
            "fetch": lambda args: self.simulator.fetch(),
            "remote": self._remote,
            "tag": self._tag,
            "stash": self._stash,
            "reset": self._reset,
            "revert": self._revert,
            "rebase": self._rebase,
            "cherry-pick": self._cherry_pick,
            "diff": self._diff,
            "show": self._show,
            "config": self._config,
        }

    @property
    def commands(self) -> list[str]:
        """Return the canonical verbs this engine understands."""
        return list(self._handlers)

    def resolve_alias(self, verb: str) -> str:
        return self.repository.aliases.get(verb, verb)

    def _describe(self, verb: str, args: list[str]) -> str:
        return " ".join(["git", verb, *args]).strip()

    @safe_command(_internal_error)
    def execute(self, verb: str, args: list[str] | None = None) -> CommandResult:
        """Run one git subcommand.

        Args:
            verb: Subcommand name or alias (``status``, ``co``, ...)
            args: Tokens following the subcommand

        Returns:
            The command's CommandResult; user errors are returned as
            error results rather than raised.
        """
        args = list(args or [])
        handler = self._handlers.get(self.resolve_alias(verb))

        if handler is None:
            result = CommandResult.error(
                f"git: '{verb}' is not a git command. See 'git --help'."
            )
        else:
            try:
                result = handler(args)
            except SimulatorError as e:
                log.debug("git {} rejected: {}", verb, e)
                result = CommandResult.error(str(e))

        result.command = self._describe(verb, args)
        self.command_executed.emit(result)
        if not result.is_error:
            self.state_changed.emit()
        return result

    def run(self, line: str) -> CommandResult:
        """Tokenize and run a raw terminal line such as ``git commit -m "x"``."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            result = CommandResult.error(f"bash: syntax error: {e}")
            result.command = line.strip()
            self.command_executed.emit(result)
            return result

        if not parts:
            return CommandResult.plain("")

        program, rest = parts[0], parts[1:]
        if program == "git":
            if not rest:
                result = CommandResult.plain(
                    "usage: git <command> [<args>]\n\n"
                    f"Available commands: {', '.join(self.commands)}"
                )
                result.command = "git"
                self.command_executed.emit(result)
                return result
            return self.execute(rest[0], rest[1:])

        if program in ("touch", "nano", "rm"):
            return self._edit_file(program, rest)

        result = CommandResult.error(f"bash: {program}: command not found")
        result.command = line.strip()
        self.command_executed.emit(result)
        return result

    def _edit_file(self, program: str, args: list[str]) -> CommandResult:
        """Apply a working-tree edit made outside git."""
        command = " ".join([program, *args])
        if not args:
            result = CommandResult.error(f"{program}: missing file operand")
        else:
            path = args[0]
            if program == "touch":
                changed = self.repository.create_file(path)
                result = (
                    CommandResult.success(f"Created {path}")
                    if changed
                    else CommandResult.plain(f"{path} already exists")
                )
            elif program == "nano":
                changed = self.repository.modify_file(path)
                if changed:
                    result = CommandResult.success(f"Modified {path}")
                elif path in self.repository.working_directory:
                    result = CommandResult.plain(f"{path} already has pending changes")
                else:
                    result = CommandResult.error(f"{program}: {path}: No such file")
            else:
                changed = self.repository.delete_file(path)
                result = (
                    CommandResult.warning(f"Deleted {path}")
                    if changed
                    else CommandResult.error(
                        f"rm: cannot remove '{path}': No such file or directory"
                    )
                )

        result.command = command
        self.command_executed.emit(result)
        if not result.is_error:
            self.state_changed.emit()
        return result

    # Argument handling per subcommand

    @staticmethod
    def _require(args: list[str], message: str) -> str:
        if not args:
            raise SimulatorError(message)
        return args[0]

    def _clone(self, args: list[str]) -> CommandResult:
        return self.simulator.clone(args[0] if args else None)

    def _add(self, args: list[str]) -> CommandResult:
        path = self._require(args, "Nothing specified, nothing added.")
        if path == ".":
            return self.simulator.add_all()
        return self.simulator.add_file(path)

    def _commit(self, args: list[str]) -> CommandResult:
        if args[:1] == ["-m"] and len(args) > 1:
            return self.simulator.commit(" ".join(args[1:]))
        if args[:1] == ["--amend"]:
            message = None
            if "-m" in args:
                rest = args[args.index("-m") + 1:]
                message = " ".join(rest) or None
            return self.simulator.amend(message)
        return self.simulator.commit()

    def _log(self, args: list[str]) -> CommandResult:
        if "--oneline" in args:
            return self.simulator.log("oneline")
        if "--graph" in args:
            return self.simulator.log("graph")
        return self.simulator.log()

    def _branch(self, args: list[str]) -> CommandResult:
        if args[:1] in (["-d"], ["-D"]):
            return self.simulator.branch_delete(
                self._require(args[1:], "fatal: branch name required")
            )
        if args:
            return self.simulator.branch_create(args[0])
        return self.simulator.branch_list()

    def _checkout(self, args: list[str]) -> CommandResult:
        if args[:1] == ["-b"]:
            return self.simulator.checkout_new(
                self._require(args[1:], "fatal: branch name required")
            )
        if args[:1] == ["--"] and len(args) > 1:
            return self.simulator.checkout_file(args[1])
        target = self._require(args, "You must specify a branch or file")
        return self.simulator.checkout(target)

    def _merge(self, args: list[str]) -> CommandResult:
        return self.simulator.merge(
            self._require(args, "You must specify a branch to merge")
        )

    def _push(self, args: list[str]) -> CommandResult:
        if args[:1] == ["-u"] or "--set-upstream" in args:
            return self.simulator.push_upstream()
        if "--tags" in args:
            return self.simulator.push_tags()
        return self.simulator.push()

    def _remote(self, args: list[str]) -> CommandResult:
        if args[:1] == ["add"] and len(args) > 2:
            return self.simulator.remote_add(args[1], args[2])
        return self.simulator.remote_list(verbose="-v" in args)

    def _tag(self, args: list[str]) -> CommandResult:
        if args[:1] == ["-a"]:
            name = self._require(args[1:], "fatal: tag name required")
            return self.simulator.tag_annotated(name, " ".join(args[2:]) or None)
        if args:
            return self.simulator.tag(args[0])
        return self.simulator.tag_list()

    def _stash(self, args: list[str]) -> CommandResult:
        if args[:1] == ["pop"]:
            return self.simulator.stash_pop()
        if args[:1] == ["list"]:
            return self.simulator.stash_list()
        return self.simulator.stash_save()

    def _reset(self, args: list[str]) -> CommandResult:
        if "--hard" in args:
            return self.simulator.reset_hard()
        return self.simulator.reset()

    def _revert(self, args: list[str]) -> CommandResult:
        return self.simulator.revert(
            self._require(args, "You must specify a commit to revert")
        )

    def _rebase(self, args: list[str]) -> CommandResult:
        if args[:1] == ["-i"]:
            return self.simulator.rebase_interactive()
        return self.simulator.rebase(
            self._require(args, "You must specify a branch to rebase onto")
        )

    def _cherry_pick(self, args: list[str]) -> CommandResult:
        return self.simulator.cherry_pick(
            self._require(args, "You must specify a commit to cherry-pick")
        )

    def _diff(self, args: list[str]) -> CommandResult:
        return self.simulator.diff(staged="--staged" in args or "--cached" in args)

    def _show(self, args: list[str]) -> CommandResult:
        return self.simulator.show(args[0] if args else None)

    def _config(self, args: list[str]) -> CommandResult:
        # `git config --list` and `git config` both list everything
        args = [a for a in args if a not in ("--list", "-l", "--global")]
        if len(args) >= 2:
            return self.simulator.config(args[0], " ".join(args[1:]))
        if args:
            return self.simulator.config(args[0])
        return self.simulator.config()
