"""Classification enums for fields, columns, rules and associations."""

from __future__ import annotations

from enum import StrEnum


class FieldKind(StrEnum):
    """Input widget kinds an entity form can declare."""

    TEXT = "text"
    TEXTAREA = "textarea"
    DATE = "date"
    CHECKBOX = "checkbox"
    MAP = "map"
    RICHTEXT = "richtext"
    MARKDOWN = "markdown"
    CODE = "code"
    UPLOAD = "upload"
    IMAGE = "image"
    URL = "url"
    TAGS = "tags"
    SELECT = "select"
    HIDDEN = "hidden"


class FormSection(StrEnum):
    """Editor areas an entity form is split into."""

    MAIN = "main"
    FIELDS = "fields"
    OPTIONS = "options"


class Align(StrEnum):
    """Horizontal alignment of a list column."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class FilterKind(StrEnum):
    """Inline filter widget attached to a list column."""

    TEXT = "text"
    NUMERIC = "numeric"
    DATE = "date"


class RuleKind(StrEnum):
    """Validation rule kinds."""

    REQUIRED = "required"
    SOMETIMES = "sometimes"
    TYPE = "type"
    MAX = "max"
    PATTERN = "pattern"
    IN = "in"
    UNIQUE = "unique"


class ListFilter(StrEnum):
    """Request-level filters a list view can enable."""

    STATUS = "status"
    SEARCH = "search"
    CREATED = "created"


class SyncMode(StrEnum):
    """How an association's membership changes on save."""

    REPLACE = "replace"
    ATTACH = "attach"


class RecordStatus(StrEnum):
    """Publication status of a record."""

    DRAFT = "draft"
    PUBLISH = "publish"
