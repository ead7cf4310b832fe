"""Enumeration type definitions"""

from enum import Enum


class FieldKind(str, Enum):
    """Input kinds a user can pick for a field"""

    TEXT = "text"
    PASSWORD = "password"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    NUMBER = "number"
    TEXTAREA = "textarea"
    EMAIL = "email"
    RANGE = "range"
    URL = "url"
    TEL = "tel"
    SEARCH = "search"
    TIME = "time"
    DATETIME_LOCAL = "datetime-local"
    MONTH = "month"
    WEEK = "week"
    DATE = "date"


class SchemaType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


CHOICE_KINDS = frozenset({FieldKind.SELECT, FieldKind.RADIO})
NUMERIC_KINDS = frozenset({FieldKind.NUMBER, FieldKind.RANGE})
