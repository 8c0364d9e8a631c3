"""Render prompt templates in grammar_checker/prompt/promptFiles using pystache.

Templates are mustache files. Partials are loaded from the same directory by
name, with any wrapping code fence stripped so Markdown-fenced files work as
partials too.

Usage:
    python -m grammar_checker.prompt.render_prompt [template_filename] [context.json]

If no arguments are given, it renders the system grammar checker prompt and
prints it to stdout.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pystache

from ..models import ErrorType

PROMPTS_DIR = Path(__file__).parent / "promptFiles"

SYSTEM_TEMPLATE = "system_grammar_checker.md"
USER_TEMPLATE = "user_grammar_checker.md"

# Partials each template needs
_TEMPLATE_PARTIALS: dict[str, list[str]] = {
    SYSTEM_TEMPLATE: ["output_format"],
    USER_TEMPLATE: [],
}


def _read_prompt(name: str) -> str:
    p = PROMPTS_DIR / name
    if not p.exists():
        raise FileNotFoundError(f"Prompt file not found: {p}")
    return p.read_text(encoding="utf-8")


def _strip_code_fences(s: str) -> str:
    """Strip a single leading and trailing code-fence line if present."""
    lines = s.splitlines()
    if not lines:
        return s
    if lines[0].lstrip().startswith("```"):
        lines = lines[1:]
    if lines and lines[-1].lstrip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _error_type_list() -> str:
    quoted = [f'"{value}"' for value in ErrorType.all_values()]
    return ", ".join(quoted[:-1]) + f", or {quoted[-1]}"


def render_template(template_name: str, context: dict | None = None) -> str:
    template = _read_prompt(template_name)
    partials = {
        name: _strip_code_fences(_read_prompt(f"{name}.md"))
        for name in _TEMPLATE_PARTIALS.get(template_name, [])
    }
    renderer = pystache.Renderer(partials=partials, missing_tags="strict")
    base_context = {"error_type_list": _error_type_list()}
    base_context.update(context or {})
    return renderer.render(template, base_context).strip()


def render_system_prompt() -> str:
    return render_template(SYSTEM_TEMPLATE)


def render_user_prompt(text: str) -> str:
    """Embed ``text`` verbatim (no HTML escaping) in the user instruction."""
    return render_template(USER_TEMPLATE, {"text": text})


def render_prompts(text: str) -> tuple[str, str]:
    """Render the (system_prompt, user_prompt) pair for checking ``text``."""
    return render_system_prompt(), render_user_prompt(text)


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    template_name = args[0] if args else SYSTEM_TEMPLATE
    context = None
    if len(args) > 1:
        context = json.loads(Path(args[1]).read_text(encoding="utf-8"))
    print(render_template(template_name, context))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
