# src/taskpad/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import shlex
from collections.abc import Awaitable, Callable
from typing import Any, cast

from ..core.envelope import ApiResponse
from ..core.state import AppState
from ..tasks.schemas import SORT_KEYS

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

# /edit and /add accept short aliases for task fields.
_FIELD_ALIASES = {"due": "dueDate", "duedate": "dueDate", "desc": "description"}


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /login, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting helpers ----


def _split_kv(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Separate free words from key=value pairs."""
    words: list[str] = []
    pairs: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key:
            k = key.strip()
            pairs[_FIELD_ALIASES.get(k.lower(), k)] = value
        else:
            words.append(a)
    return words, pairs


def _fail_text(env: ApiResponse) -> str:
    lines = [f"Error: {env.message or 'request failed'}"]
    for e in env.errors:
        lines.append(f"  - {e.get('field')}: {e.get('message')}")
    return "\n".join(lines)


def format_task(task: dict[str, Any], index: int | None = None) -> str:
    prefix = f"{index}. " if index is not None else ""
    due = f"  due {task['dueDate']}" if task.get("dueDate") else ""
    return (
        f"{prefix}[{task.get('status')}] ({task.get('priority')}) {task.get('title')}"
        f"{due}  id={task.get('_id')}"
    )


def format_task_details(task: dict[str, Any]) -> str:
    lines = [format_task(task)]
    if task.get("description"):
        lines.append(f"  {task['description']}")
    lines.append(f"  created {task.get('createdAt')}  updated {task.get('updatedAt')}")
    return "\n".join(lines)


def format_user(user: dict[str, Any]) -> str:
    return f"{user.get('name')} <{user.get('email')}> id={user.get('_id')}"


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    user = state.session.current()
    who = format_user(user) if user else "not logged in"
    base_url = getattr(state.settings, "api_base_url", "") or "(none)"
    return (
        "Status:\n"
        f"  Backend: {base_url}\n"
        f"  Mode: {state.api.mode}\n"
        f"  User: {who}"
    )


async def cmd_reconnect(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        with contextlib.suppress(Exception):
            emit("Probing backend...")
    mode = await state.api.reprobe()
    return f"Mode: {mode}"


async def cmd_signup(state: AppState, args: list[str]) -> str:
    """/signup <name> <email> <password> (quote the name if it has spaces)"""
    if len(args) != 3:
        return 'Usage: /signup "<name>" <email> <password>'
    env = await state.api.signup(args[0], args[1], args[2])
    if not env.success:
        return _fail_text(env)
    return f"Welcome, {format_user(env.data['user'])}."


async def cmd_login(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /login <email> <password>"
    env = await state.api.login(args[0], args[1])
    if not env.success:
        return _fail_text(env)
    return f"Logged in as {format_user(env.data['user'])}."


async def cmd_logout(state: AppState, args: list[str]) -> str:
    env = await state.api.logout()
    state.last_listed = []
    return (env.message or "Logged out.") if env.success else _fail_text(env)


async def cmd_me(state: AppState, args: list[str]) -> str:
    env = await state.api.me()
    return format_user(env.data) if env.success else _fail_text(env)


async def cmd_profile(state: AppState, args: list[str]) -> str:
    """/profile name=<name> email=<email>"""
    _, pairs = _split_kv(args)
    if not pairs:
        return "Usage: /profile name=<name> email=<email>"
    env = await state.api.update_profile(pairs)
    return f"Profile updated: {format_user(env.data)}" if env.success else _fail_text(env)


async def cmd_passwd(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /passwd <current> <new>"
    env = await state.api.change_password(args[0], args[1])
    return (env.message or "Password changed.") if env.success else _fail_text(env)


async def cmd_delete_account(state: AppState, args: list[str]) -> str:
    if args != ["confirm"]:
        return "This removes your account and all your tasks. Run /deleteaccount confirm to proceed."
    env = await state.api.delete_account()
    state.last_listed = []
    return (env.message or "Account deleted.") if env.success else _fail_text(env)


async def cmd_tasks(state: AppState, args: list[str]) -> str:
    """/tasks [status=..] [priority=..] [search=..] [sort=newest|oldest|title|priority]"""
    words, pairs = _split_kv(args)
    if words and "search" not in pairs:
        pairs["search"] = " ".join(words)
    pairs.setdefault("sort", "newest")

    env = await state.api.list_tasks(pairs)
    if not env.success:
        return _fail_text(env)

    items = (env.data or {}).get("data") or []
    state.last_listed = [str(t.get("_id")) for t in items]
    if not items:
        return "No tasks."
    lines = [format_task(t, i) for i, t in enumerate(items, start=1)]
    lines.append(f"({len(items)} task(s); sort={pairs['sort']})")
    return "\n".join(lines)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title words> [description=..] [priority=..] [status=..] [due=YYYY-MM-DD]"""
    words, pairs = _split_kv(args)
    if words:
        pairs.setdefault("title", " ".join(words))
    env = await state.api.create_task(pairs)
    return f"Created: {format_task(env.data)}" if env.success else _fail_text(env)


async def cmd_show(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /show <task id or number>"
    env = await state.api.get_task(state.resolve_task_ref(args[0]))
    return format_task_details(env.data) if env.success else _fail_text(env)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    words, pairs = _split_kv(args)
    if len(words) != 1 or not pairs:
        return "Usage: /edit <task id or number> field=value ..."
    env = await state.api.update_task(state.resolve_task_ref(words[0]), pairs)
    return f"Updated: {format_task(env.data)}" if env.success else _fail_text(env)


async def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <task id or number>"
    env = await state.api.update_task(state.resolve_task_ref(args[0]), {"status": "completed"})
    return f"Completed: {format_task(env.data)}" if env.success else _fail_text(env)


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <task id or number>"
    env = await state.api.delete_task(state.resolve_task_ref(args[0]))
    return (env.message or "Deleted.") if env.success else _fail_text(env)


async def cmd_stats(state: AppState, args: list[str]) -> str:
    env = await state.api.stats()
    if not env.success:
        return _fail_text(env)
    s = env.data or {}
    return (
        f"Total: {s.get('total', 0)}  pending: {s.get('pending', 0)}  "
        f"in-progress: {s.get('in-progress', 0)}  completed: {s.get('completed', 0)}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show backend mode and the logged-in user.")
registry.register("reconnect", cmd_reconnect, help_text="Probe the backend again.")
registry.register("signup", cmd_signup, help_text='Create an account: /signup "<name>" <email> <password>.')
registry.register("login", cmd_login, help_text="Log in: /login <email> <password>.")
registry.register("logout", cmd_logout, help_text="Log out.")
registry.register("me", cmd_me, help_text="Show the logged-in user.")
registry.register("profile", cmd_profile, help_text="Update profile: /profile name=<name> email=<email>.")
registry.register("passwd", cmd_passwd, help_text="Change password: /passwd <current> <new>.")
registry.register("deleteaccount", cmd_delete_account, help_text="Delete account and tasks: /deleteaccount confirm.")
registry.register(
    "tasks",
    cmd_tasks,
    help_text=f"List tasks: /tasks [status=..] [priority=..] [search=..] [sort={'|'.join(SORT_KEYS)}].",
    aliases=["ls"],
)
registry.register("add", cmd_add, help_text="Create a task: /add <title> [priority=..] [due=YYYY-MM-DD].")
registry.register("show", cmd_show, help_text="Show one task: /show <id or number>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id or number> field=value ...")
registry.register("done", cmd_done, help_text="Mark a task completed: /done <id or number>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id or number>.")
registry.register("stats", cmd_stats, help_text="Task counts by status.")
