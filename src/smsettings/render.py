"""HTML projection of settings fields.

:func:`render_field` turns one descriptor and its resolved value into a form
table row.  It only switches on the field type; values are looked up by
:class:`Renderer`, which also expands ``%pages%`` option sets.  Types without
a template are handed to the ``sm_admin_field_<type>`` filter.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any

from jinja2 import DictLoader, Environment, StrictUndefined
from markupsafe import Markup

from .codec import as_flag, resolve_options
from .engine import SettingsEngine
from .hooks import Hooks
from .pages import PageLister
from .sanitize import kses_post, sanitize_title
from .schema import LAYOUT_TYPES, FieldSchema, coerce_field
from .templates import TEMPLATE_FOR_TYPE, TEMPLATES

OPTION_TYPES = frozenset({"select", "multiselect", "radio"})


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=DictLoader(TEMPLATES),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def help_tip(tip: str) -> Markup:
    return Markup('<span class="sm-help-tip" data-tip="{}"></span>').format(tip)


def autop(text: str) -> Markup:
    """Wrap blank-line separated paragraphs of sanitized *text* in ``<p>``."""
    paragraphs = [p.strip() for p in kses_post(text).split("\n\n") if p.strip()]
    return Markup("\n").join(Markup("<p>{}</p>").format(Markup(p)) for p in paragraphs)


def field_description(field: FieldSchema) -> tuple[Markup, Markup]:
    """Return the ``(description, tooltip)`` fragments for *field*."""
    description: str | bool = ""
    tooltip: str | bool = ""
    if field.desc_tip is True:
        tooltip = field.desc
    elif field.desc_tip:
        description = field.desc
        tooltip = field.desc_tip
    elif field.desc:
        description = field.desc

    desc_html = Markup("")
    if description:
        safe = Markup(kses_post(description))
        if field.type in ("textarea", "radio"):
            desc_html = Markup('<p style="margin-top:0">{}</p>').format(safe)
        elif field.type == "checkbox":
            desc_html = safe
        elif field.type in ("select", "multiselect"):
            desc_html = Markup('<p class="description">{}</p>').format(safe)
        else:
            desc_html = Markup('<span class="description">{}</span>').format(safe)

    tip_html = Markup("")
    if tooltip:
        if field.type == "checkbox":
            tip_html = Markup('<p class="description">{}</p>').format(Markup(kses_post(tooltip)))
        else:
            tip_html = help_tip(str(tooltip))
    return desc_html, tip_html


def _selected_keys(value: Any) -> set[str]:
    if value is None:
        return set()
    if isinstance(value, (list, tuple, set)):
        return {str(v) for v in value}
    return {str(value)}


def _visibility_class(field: FieldSchema) -> str:
    classes = []
    if field.hide_if_checked == "yes" or field.show_if_checked == "yes":
        classes.append("hidden_option")
    if field.hide_if_checked == "option":
        classes.append("hide_options_if_checked")
    if field.show_if_checked == "option":
        classes.append("show_options_if_checked")
    return " ".join(classes)


def _section_hooks(field: FieldSchema, hooks: Hooks) -> dict[str, Markup]:
    markup = {"hook_markup": Markup(""), "hook_end": Markup(""), "hook_after": Markup("")}
    if not field.id:
        return markup
    slug = sanitize_title(field.id)
    if field.type == "title":
        markup["hook_markup"] = Markup(hooks.apply_filters(f"sm_settings_{slug}", Markup(""), field))
    else:
        markup["hook_end"] = Markup(hooks.apply_filters(f"sm_settings_{slug}_end", Markup(""), field))
        markup["hook_after"] = Markup(hooks.apply_filters(f"sm_settings_{slug}_after", Markup(""), field))
    return markup


def render_field(
    field: FieldSchema | Mapping[str, Any],
    value: Any = None,
    *,
    options: Mapping[str, Any] | None = None,
    hooks: Hooks | None = None,
) -> Markup:
    """Render *field* showing *value* (its default when ``None``)."""
    spec = coerce_field(field, require_id=False)
    if spec is None:
        return Markup("")
    hooks = hooks if hooks is not None else Hooks()

    template_name = TEMPLATE_FOR_TYPE.get(spec.type)
    if template_name is None:
        return Markup(hooks.apply_filters(f"sm_admin_field_{spec.type}", Markup(""), spec))

    if value is None:
        value = "" if spec.default is None else spec.default
    if options is None:
        options = resolve_options(spec, None)
    description, tooltip = field_description(spec)

    context: dict[str, Any] = {
        "field": spec,
        "value": value,
        "type_class": sanitize_title(spec.type),
        "attrs": list(spec.custom_attributes.items()),
        "description": description,
        "tooltip": tooltip,
        "desc_html": Markup(""),
        "options": {str(k): v for k, v in options.items()},
        "selected": _selected_keys(value),
        "multiple": spec.type == "multiselect",
        "checked": bool(as_flag(value)) if spec.type == "checkbox" else False,
        "visibility_class": _visibility_class(spec),
        "hook_markup": Markup(""),
        "hook_end": Markup(""),
        "hook_after": Markup(""),
    }
    if spec.type == "title" and spec.desc:
        context["desc_html"] = autop(spec.desc)
    elif spec.type == "description":
        context["desc_html"] = Markup(kses_post(spec.desc))
    if spec.type in ("title", "sectionend"):
        context.update(_section_hooks(spec, hooks))
    return Markup(_environment().get_template(template_name).render(context))


class Renderer:
    """Render a schema with the values currently held by *engine*."""

    def __init__(
        self,
        engine: SettingsEngine,
        *,
        hooks: Hooks | None = None,
        pages: PageLister | None = None,
    ) -> None:
        self.engine = engine
        self.hooks = hooks if hooks is not None else engine.codec.hooks
        self.pages = pages if pages is not None else engine.codec.pages

    def value_for(self, field: FieldSchema) -> Any:
        if field.transient:
            return field.value
        if field.type in LAYOUT_TYPES or not field.id:
            return None
        default = "" if field.default is None else field.default
        return self.engine.get_option(field.id, default)

    def output_fields(self, fields: Iterable[FieldSchema | Mapping[str, Any]]) -> Markup:
        rows: list[Markup] = []
        for entry in fields:
            field = coerce_field(entry, require_id=False)
            if field is None:
                continue
            options = resolve_options(field, self.pages) if field.type in OPTION_TYPES else None
            rows.append(render_field(field, self.value_for(field), options=options, hooks=self.hooks))
        return Markup("").join(rows)


__all__ = ["render_field", "field_description", "help_tip", "Renderer"]
