"""Template catalog services."""

from .catalog import (
    TemplateSummary,
    add_station,
    create_template,
    delete_template,
    list_stations,
    list_templates,
    remove_station,
    rename_template,
    update_station,
)

__all__ = [
    "TemplateSummary",
    "add_station",
    "create_template",
    "delete_template",
    "list_stations",
    "list_templates",
    "remove_station",
    "rename_template",
    "update_station",
]
