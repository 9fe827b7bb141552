"""
Terminal text for command outcomes.
"""
import click
from datetime import date
from typing import Optional, List, Dict, Any
from .models import Color, TaskRow, TaskView
from .commands import Outcome

COLOR_STYLES = {
    Color.RED: "red",
    Color.YELLOW: "yellow",
    Color.GREEN: "green",
    Color.BLUE: "blue",
    Color.PURPLE: "magenta",
}

LABEL_WIDTH = 15

def color_swatch(color: Optional[Color]) -> str:
    if color is None:
        return " "
    return click.style(" ", bg=COLOR_STYLES[color])

def color_name(color: Optional[Color]) -> str:
    if color is None:
        return "None"
    return click.style(color.value, fg=COLOR_STYLES[color])

def format_due(due: Optional[date], overdue: bool) -> str:
    if due is None:
        return ""
    text = due.isoformat()
    # Past due dates stand out
    return click.style(text, fg="red") if overdue else text

def render_table(rows: List[TaskRow]) -> str:
    lines = [f"   ID  {'Task name':<75} {'Creation date':<14} {'Due date':<11} Note"]
    for row in rows:
        due = format_due(row.due_date, row.overdue)
        # Pad on the plain text so escape codes don't skew the columns
        padding = " " * max(0, 11 - len(row.due_date.isoformat() if row.due_date else ""))
        note = "✓" if row.has_note else ""
        lines.append(f"{color_swatch(row.color)} {row.id:>3}  {row.name:<75} "
                     f"{row.creation_date.isoformat():<14} {due}{padding} {note}".rstrip())
    return "\n".join(lines) + "\n"

def _field(label: str, value: Any) -> str:
    return f"{label:>{LABEL_WIDTH}} {value}".rstrip()

def render_view(view: TaskView) -> str:
    lines = [
        _field("ID:", view.id),
        _field("Name:", view.name),
        _field("Creation date:", view.creation_date.isoformat()),
        _field("Due date:", format_due(view.due_date, view.overdue)),
        _field("Color:", color_name(view.color)),
    ]
    label = "Note:"
    for line in view.note_lines:
        lines.append(_field(label, line))
        label = ""
    return "\n".join(lines) + "\n"

def render_history(generations: List[Dict[str, Any]]) -> str:
    if not generations:
        return "📭 No undo steps available"
    lines = [f"📦 {len(generations)} undo step(s) available:"]
    for entry in generations:
        saved = entry["modified_at"].strftime("%Y-%m-%d %H:%M:%S")
        lines.append(f"   {entry['generation']:>3}  {saved}  {entry['path'].name}")
    return "\n".join(lines)

def render(outcome: Outcome) -> str:
    """Text to show the user after a successful command."""
    command, value = outcome.command, outcome.value
    if command == "add":
        return f"✅ Task created with ID {value}"
    if command == "rename":
        old_name, new_name = value
        return f"✅ Renamed task '{old_name}' to '{new_name}'"
    if command == "remove":
        return f"🗑️  Removed task '{value}'"
    if command == "color":
        name, color = value
        if color is None:
            return f"✅ Color removed for task '{name}'"
        return f"✅ Color for task '{name}' was set to {color_name(color)}"
    if command == "due":
        name, due = value
        return f"📅 Due date for task '{name}' set to {due.isoformat()}"
    if command == "note":
        name, note = value
        if not note:
            return f"✅ Note cleared for task '{name}'"
        return f"📝 Note updated for task '{name}'"
    if command == "sort":
        return f"✅ Sorted {value} task(s)"
    if command == "list":
        return render_table(value)
    if command == "show":
        return render_view(value)
    if command == "undo":
        return "↩️  Last change undone"
    if command == "history":
        return render_history(value)
    if command == "info":
        text = (f"{value['name']} version {value['version']}, written by {value['authors']} "
                f"and released under the {value['license']} license")
        if value["repository"]:
            text = f"{text}\n{value['repository']}"
        return text
    return ""
