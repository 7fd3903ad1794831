"""Jinja2 sources for the settings form rows."""

from __future__ import annotations

_LABEL = """\
<th scope="row" class="titledesc">
<label for="{{ field.id }}">{{ field.title }}</label>
{{ tooltip }}
</th>
"""

_ATTRS = "{% for name, val in attrs %} {{ name }}=\"{{ val }}\"{% endfor %}"

TEMPLATES: dict[str, str] = {
    "title.html": """\
{% if field.title %}<h2 class="forminp-title">{{ field.title }}</h2>
{% endif %}{{ desc_html }}<table class="form-table">
{{ hook_markup }}""",
    "sectionend.html": """\
{{ hook_end }}</table>
{{ hook_after }}""",
    "input.html": """\
<tr valign="top">
""" + _LABEL + """\
<td class="forminp forminp-{{ type_class }}">
<input name="{{ field.id }}" id="{{ field.id }}" type="{{ field.type }}" style="{{ field.css }}" \
value="{{ value }}" class="{{ field.css_class }}" placeholder="{{ field.placeholder }}\"""" + _ATTRS + """ /> {{ description }}
</td>
</tr>
""",
    "color.html": """\
<tr valign="top">
""" + _LABEL + """\
<td class="forminp forminp-{{ type_class }}">&lrm;
<span class="colorpickpreview" style="background: {{ value }}"></span>
<input name="{{ field.id }}" id="{{ field.id }}" type="text" dir="ltr" style="{{ field.css }}" \
value="{{ value }}" class="{{ field.css_class }}colorpick" placeholder="{{ field.placeholder }}\"""" + _ATTRS + """ />&lrm; {{ description }}
<div id="colorPickerDiv_{{ field.id }}" class="colorpickdiv" \
style="z-index: 100;background:#eee;border:1px solid #ccc;position:absolute;display:none;"></div>
</td>
</tr>
""",
    "textarea.html": """\
<tr valign="top">
""" + _LABEL + """\
<td class="forminp forminp-{{ type_class }}">
{{ description }}
<textarea name="{{ field.id }}" id="{{ field.id }}" style="{{ field.css }}" class="{{ field.css_class }}" \
placeholder="{{ field.placeholder }}\"""" + _ATTRS + """>{{ value }}</textarea>
</td>
</tr>
""",
    "select.html": """\
<tr valign="top">
""" + _LABEL + """\
<td class="forminp forminp-{{ type_class }}">
<select name="{{ field.id }}{% if multiple %}[]{% endif %}" id="{{ field.id }}" style="{{ field.css }}" \
class="{{ field.css_class }}\"""" + _ATTRS + """{% if multiple %} multiple="multiple"{% endif %}>
{% for key, label in options.items() %}
<option value="{{ key }}"{% if key in selected %} selected="selected"{% endif %}>{{ label }}</option>
{% endfor %}
</select> {{ description }}
</td>
</tr>
""",
    "radio.html": """\
<tr valign="top">
""" + _LABEL + """\
<td class="forminp forminp-{{ type_class }}">
<fieldset>
{{ description }}
<ul>
{% for key, label in options.items() %}
<li><label><input name="{{ field.id }}" value="{{ key }}" type="radio" style="{{ field.css }}" \
class="{{ field.css_class }}\"""" + _ATTRS + """{% if key in selected %} checked="checked"{% endif %} /> {{ label }}</label></li>
{% endfor %}
</ul>
</fieldset>
</td>
</tr>
""",
    "checkbox.html": """\
<tr valign="top" class="{{ visibility_class }}">
<th scope="row" class="titledesc">{{ field.title }}</th>
<td class="forminp forminp-checkbox">
<fieldset>
{% if field.title %}<legend class="screen-reader-text"><span>{{ field.title }}</span></legend>
{% endif %}\
<label for="{{ field.id }}">
<input name="{{ field.id }}" id="{{ field.id }}" type="checkbox" class="{{ field.css_class }}" value="1"\
{% if checked %} checked="checked"{% endif %}""" + _ATTRS + """ /> {{ description }}
</label> {{ tooltip }}
</fieldset>
</td>
</tr>
""",
    "image.html": """\
<tr valign="top">
""" + _LABEL + """\
<td class="forminp forminp-{{ type_class }}">
<div class="image-picker-form-container">
<input name="{{ field.id }}" id="{{ field.id }}" type="text" style="{{ field.css }}" value="{{ value }}" \
class="{{ field.css_class }}" placeholder="{{ field.placeholder }}\"""" + _ATTRS + """ />
<a id="upload_{{ field.id }}" href="#" class="button upload-image" title="Choose Default Image">Upload Image</a>
</div>
{{ description }}
<div id="default-image-thumb-load" style="width: 250px;">
{% if value %}<img style="width: inherit;" src="{{ value }}" alt="default image" />
{% endif %}\
</div>
</td>
</tr>
""",
    "description.html": """\
<tr valign="top">
<td class="forminp forminp-{{ type_class }}" colspan="2">
<p>{{ desc_html }}</p>
</td>
</tr>
""",
    "separator.html": """\
<tr valign="top">
<td class="forminp forminp-{{ type_class }}" colspan="2">
<hr/>
</td>
</tr>
""",
    "separator_title.html": """\
<tr valign="top">
<td class="forminp forminp-{{ type_class }}" colspan="2">
<h2>{{ field.title }}</h2>
</td>
</tr>
""",
}

TEMPLATE_FOR_TYPE: dict[str, str] = {
    "text": "input.html",
    "email": "input.html",
    "number": "input.html",
    "password": "input.html",
    "color": "color.html",
    "textarea": "textarea.html",
    "select": "select.html",
    "multiselect": "select.html",
    "radio": "radio.html",
    "checkbox": "checkbox.html",
    "image": "image.html",
    "title": "title.html",
    "sectionend": "sectionend.html",
    "description": "description.html",
    "separator": "separator.html",
    "separator_title": "separator_title.html",
}
