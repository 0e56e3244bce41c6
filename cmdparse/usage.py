"""
cmdparse usage: rich help rendering for a registry.

Layout
- usage line: the command route followed by every visible option and, when the
  registry has commands, a "<command> ..." placeholder (wrapped with a hanging indent).
- summary paragraph.
- commands table (name / help, with the visible options of each command).
- options section: one entry per visible spec, names and value forms on the left,
  the description in a hanging-indent column on the right.

Value forms
- short only:  "-o FILE" / "-o [FILE]"
- with a long: "--output=FILE" / "--output[=FILE]"
- repeatable options are suffixed with "...".
"""
from collections import defaultdict, deque

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.containers import Lines
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .utils import Unset

PALETTE = {
    "usage-label": "bold #00E6FF",
    "program-name": "bold #FF4D94",
    "summary-section": "italic #A3A3A3",
    "group-label": "bold #FFFFFF",
    "option-description": "#9CA3AF",
    "option-name": "bold #00E6FF",
    "flag-name": "bold #22C55E",
    "deprecated-name": "bold #F97316 strike",
    "metavar": "bold #FFD600",
    "deprecated-metavar": "bold #F97316 strike",
    "commands-title": "bold #FFFFFF",
    "commands-table": "#4B5563",
    "command": "bold #36C5F0",
    "command-description": "#9CA3AF",
    "panel-title": "bold #FF4D94",
}


def metavar(spec, /):
    """value label of a value-taking spec: its metavar, else its upper-cased key."""
    if spec.metavar is not None:
        return spec.metavar
    return spec.key.upper().replace("-", "_") if spec.long is not None else "VALUE"


def forms(spec, /):
    """
    plain spellings of a spec as shown in help, short first.

        >>> forms(option("-o", "--output", metavar="FILE"))
        ('-o', '--output=FILE')
    """
    names = list(spec.names)
    if spec.takes_value:
        label = metavar(spec)
        if spec.long is not None:
            names[-1] += ("[=%s]" if spec.optional else "=%s") % label
        else:
            names[-1] += (" [%s]" if spec.optional else " %s") % label
    if spec.repeatable:
        names[-1] += "..."
    return tuple(names)


def render(registry, /, *, width=Unset):
    """
    build the help renderable of a registry.

    palette keys
    - usage-label, program-name, summary-section, group-label
    - option-name, flag-name, deprecated-name, metavar, deprecated-metavar,
      option-description
    - commands-title, commands-table, command, command-description
    - panel-title

    customization
    - a mapping named __styles__ in __main__ overrides any palette entry.
    - when colorful is False, styling is suppressed; deprecated entries keep strike.
    """
    styles = defaultdict(str, PALETTE | getattr(__import__("__main__"), "__styles__", {}))
    colorful = registry.colorful
    if width is Unset:
        width = Console().width
    width -= 4 * registry.fancy

    def styler(style):
        if "deprecated" in style and not colorful:
            return "strike"
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(str(fragment))
        return Text(str(fragment), style)

    def spelling(spec, form):
        name, separator, value = form.partition("=") if form.startswith("--") else form.partition(" ")
        style = "deprecated-name" if spec.deprecated else "option-name" if spec.takes_value else "flag-name"
        fragment = text(name, styler(style))
        if separator or value:
            fragment = Text.assemble(
                fragment,
                separator,
                text(value, styler("deprecated-metavar" if spec.deprecated else "metavar")),
            )
        return fragment

    visible = [spec for spec in registry if not spec.hidden]
    renders = []

    usage = Text()
    usage.append("usage", styler("usage-label")).append(":").append(" ")
    usage.append(text(registry.route, styler("program-name")))
    offset = len(usage) + 1

    inputs = deque(Text.assemble("[", spelling(spec, forms(spec)[-1]), "]") for spec in visible)
    if registry.commands:
        inputs.append(Text("<command> ..."))

    lines = Lines()
    while inputs:
        input = inputs.popleft()
        if lines and len(lines[-1]) + 1 + len(input) <= width - offset:
            lines[-1].append(Text(" ") + input)
        else:
            lines.append(input)
    for index, line in enumerate(lines):
        usage.append(" " if index == 0 else "\n" + " " * offset).append(line)
    renders.append(usage.append("\n"))

    if registry.summary:
        renders.append(text(registry.summary, styler("summary-section")).append("\n"))

    if registry.commands:
        table = Table(
            "name", "help",
            title=text("commands", styler("commands-title")),
            width=int(width * (2 / 3)),
            box=ROUNDED,
            style=styler("commands-table"),
            header_style=styler("commands-title"),
        )
        for name, child in registry.commands.items():
            descr = child.summary or "run '%s --help' for details" % child.route
            help = text(descr, styler("command-description"))
            if options := [spec for spec in child if not spec.hidden]:
                help = Text.assemble(
                    help,
                    "\n",
                    text("options", styler("group-label")),
                    ": ",
                    Text(", ").join(spelling(spec, forms(spec)[-1]) for spec in options),
                )
            table.add_row(text(name, styler("command")), help)
        renders.append(table)

    if visible:
        padding = 2
        indent = min(max(padding + len(", ".join(forms(spec))) for spec in visible) + 2, width // 3)

        section = Text()
        section.append(text("options", styler("group-label"))).append(":").append("\n")
        for spec in visible:
            entry = Text(" " * padding).append(Text(", ").join(spelling(spec, form) for form in forms(spec)))
            if spec.descr:
                if len(entry) >= indent:
                    entry.append("\n").append(" " * indent)
                else:
                    entry.append(" " * (indent - len(entry)))
                wrapped = text(spec.descr, styler("option-description")).wrap(Console(width=width), width - indent)
                for index, line in enumerate(wrapped):
                    entry.append(line if index == 0 else Text("\n" + " " * indent).append(line))
            section.append(entry).append("\n")
        renders.append(section)

    if isinstance(renders[-1], Text):
        renders[-1].rstrip()

    renderable = Group(*renders)
    if registry.fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[", " ", "%s help" % registry.route, " ", "]", style=styler("panel-title")),
            title_align="left",
        )
    return renderable


def print_usage(registry, /, *, stderr=False):
    """print the help of a registry to stdout (or stderr)."""
    console = Console(stderr=stderr)
    console.print(render(registry, width=console.width))


__all__ = (
    "forms",
    "metavar",
    "render",
    "print_usage",
)
