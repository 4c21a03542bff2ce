"""Code template definitions and discovery."""

from vartypes.templates.base import (
    NAME_PLACEHOLDER,
    ORDER_PLACEHOLDER,
    REFERABLE_PLACEHOLDER,
    TYPE_PLACEHOLDER,
    Placement,
    TemplateDescriptor,
    apply_placeholders,
)
from vartypes.templates.loader import (
    TemplateCatalog,
    TemplateError,
    copy_default_templates_to_user,
    get_global_templates_path,
    get_local_templates_path,
    get_package_templates_path,
    get_template_search_paths,
    load_template_from_file,
    resolve_templates_root,
)

__all__ = [
    "NAME_PLACEHOLDER",
    "ORDER_PLACEHOLDER",
    "REFERABLE_PLACEHOLDER",
    "TYPE_PLACEHOLDER",
    "Placement",
    "TemplateCatalog",
    "TemplateDescriptor",
    "TemplateError",
    "apply_placeholders",
    "copy_default_templates_to_user",
    "get_global_templates_path",
    "get_local_templates_path",
    "get_package_templates_path",
    "get_template_search_paths",
    "load_template_from_file",
    "resolve_templates_root",
]

# Bundled template files, relative to the package defaults directory
DEFAULT_TEMPLATES: tuple[str, ...] = (
    "@Name@Variable.cs.template",
    "@Name@Reference.cs.template",
    "@Name@Registrater.cs.template",
    "@Name@Comparator.cs.template",
    "Editor/@Name@ReferenceDrawer.cs.template",
)
