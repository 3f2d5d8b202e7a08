# memopad/main.py
"""
memopad CLI entrypoint.

Loads every memo from the data service, then reads commands:
- list / search <text> / reload
- new / edit <n> / delete <n>
- help / quit

<n> is the number shown next to a memo in the current (filtered) list.
"""

from __future__ import annotations

import argparse
from datetime import date, datetime
from typing import Callable, List, Optional

from memopad.clients.store_client import build_gateway
from memopad.core.memo_store import MemoStore
from memopad.core.session import EditSessionError
from memopad.memory.models import Memo, MemoValidationError

HELP_TEXT = """Commands:
  list             show memos (filtered by the current search)
  search <text>    filter by title/content; 'search' alone clears it
  new              write a new memo
  edit <n>         edit memo number n
  delete <n>       delete memo number n (asks first)
  reload           fetch everything again
  help             this text
  quit             leave"""

InputFn = Callable[[str], str]

# Typed as the content answer to empty a memo body while editing.
CLEAR_CONTENT = "-"


def date_label(created_at: str, today: Optional[date] = None) -> str:
    """
    'today' for memos created today, otherwise a short month/day label.
    """
    try:
        created = datetime.fromisoformat(created_at.replace("Z", "+00:00")).astimezone()
    except (AttributeError, ValueError):
        return ""
    today = today or date.today()
    if created.date() == today:
        return "today"
    return f"{created.strftime('%b')} {created.day}"


def render_list(store: MemoStore) -> List[str]:
    if store.loading:
        return ["Loading..."]

    memos = store.visible_memos()
    if not memos:
        if store.search_text.strip():
            return [f"No memos match {store.search_text!r}."]
        return ["No memos yet. Type 'new' to write one!"]

    lines = []
    for idx, memo in enumerate(memos, start=1):
        label = date_label(memo.created_at)
        lines.append(f"{idx:>3}. {memo.title}  [{label}]")
        if memo.content:
            first_line = memo.content.splitlines()[0]
            lines.append(f"     {first_line}")
    return lines


def _pick(store: MemoStore, arg: str) -> Optional[Memo]:
    memos = store.visible_memos()
    try:
        idx = int(arg)
    except ValueError:
        print(f"Not a memo number: {arg!r}")
        return None
    if not 1 <= idx <= len(memos):
        print(f"No memo number {idx}.")
        return None
    return memos[idx - 1]


def confirm_prompt(input_fn: InputFn, question: str) -> bool:
    answer = input_fn(f"{question} [y/N] ").strip().lower()
    return answer in {"y", "yes"}


def run_edit_session(store: MemoStore, input_fn: InputFn) -> Optional[Memo]:
    """
    Prompt for title/content for the open session and submit.

    ENTER keeps the value in brackets, '-' clears the content. The values
    from a failed submit become the defaults for the next try, so nothing
    typed is lost. Answering no to 'Try again?' cancels.
    """
    editing = store.session.is_editing
    default_title, default_content = store.session.initial_fields()

    while store.session.is_open:
        title = input_fn(f"Title [{default_title}]: " if default_title else "Title: ")
        if not title.strip():
            title = default_title

        if default_content:
            print(f"(current content, ENTER keeps it, '-' clears it)\n{default_content}")
        content = input_fn("Content: ")
        if not content:
            content = default_content
        elif content.strip() == CLEAR_CONTENT:
            content = ""

        default_title, default_content = title.strip(), content

        try:
            memo = store.submit(title, content)
        except MemoValidationError:
            print("Please enter a title.")
            if not confirm_prompt(input_fn, "Try again?"):
                store.cancel_edit()
            continue

        if memo is not None:
            print("Saved." if editing else "Created.")
            return memo

        print("Could not save the memo (see log).")
        if not confirm_prompt(input_fn, "Try again?"):
            store.cancel_edit()

    print("Cancelled.")
    return None


def handle_command(store: MemoStore, line: str, input_fn: InputFn = input) -> bool:
    """
    Execute one command line. Returns False when the user wants to quit.
    """
    cmd, _, arg = line.strip().partition(" ")
    cmd = cmd.lower()
    arg = arg.strip()

    if cmd in {"quit", "exit", "q"}:
        return False

    if cmd in {"", "list", "ls"}:
        pass
    elif cmd == "help":
        print(HELP_TEXT)
        return True
    elif cmd == "search":
        store.set_search(arg)
    elif cmd == "reload":
        if not store.load():
            print("Could not load memos (see log).")
    elif cmd == "new":
        try:
            store.open_new()
        except EditSessionError as e:
            print(e)
            return True
        run_edit_session(store, input_fn)
    elif cmd == "edit":
        memo = _pick(store, arg)
        if memo is None:
            return True
        try:
            store.open_edit(memo.id)
        except EditSessionError as e:
            print(e)
            return True
        run_edit_session(store, input_fn)
    elif cmd in {"delete", "rm"}:
        memo = _pick(store, arg)
        if memo is None:
            return True
        deleted = store.delete(
            memo.id,
            confirm=lambda: confirm_prompt(input_fn, f"Really delete {memo.title!r}?"),
        )
        if deleted:
            print("Deleted.")
        elif store.get(memo.id) is not None:
            print("Not deleted.")
    else:
        print(f"Unknown command: {cmd!r}. Type 'help'.")
        return True

    for out in render_list(store):
        print(out)
    return True


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="memopad: list, write and search short memos.")
    p.add_argument("--search", default=None, help="Initial search text.")
    return p


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    store = MemoStore(build_gateway())
    store.set_search(args.search)
    print("memopad. Type 'help' for commands, 'quit' to leave.\n")

    if not store.load():
        print("Could not load memos (see log).")
    for out in render_list(store):
        print(out)

    while True:
        try:
            line = input("\nmemo> ")
        except (EOFError, KeyboardInterrupt):
            print("\n[Session ended]")
            break

        if not handle_command(store, line):
            print("Bye.")
            break


if __name__ == "__main__":
    main()
