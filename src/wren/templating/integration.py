"""Kida environment setup.

Creates a kida Environment from AppConfig and binds user-registered
filters and globals. The environment is created once during
``App._freeze()`` and passed through the request pipeline.
"""

from collections.abc import Callable
from typing import Any

from kida import Environment, FileSystemLoader

from wren.config import AppConfig
from wren.templating.returns import InlineTemplate, Template


def create_environment(
    config: AppConfig,
    filters: dict[str, Callable[..., Any]],
    globals_: dict[str, Any],
) -> Environment:
    """Create a kida Environment over ``config.template_dir``."""
    env = Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )

    if filters:
        env.update_filters(filters)

    for name, value in globals_.items():
        env.add_global(name, value)

    return env


def render_template(env: Environment, tpl: Template) -> str:
    """Render a full template to string."""
    template = env.get_template(tpl.name)
    return template.render(tpl.context)


def render_inline(env: Environment | None, tpl: InlineTemplate) -> str:
    """Render a string template, with a bare Environment if none is configured."""
    env = env or Environment()
    return env.from_string(tpl.source).render(tpl.context)
