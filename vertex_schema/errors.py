"""Errors raised by the schema converters."""


class SchemaConversionError(ValueError):
    """Base class for every conversion failure."""


class UnsupportedConstructError(SchemaConversionError):
    """The source schema uses something the Vertex schema cannot express."""


class MalformedSchemaError(SchemaConversionError):
    """A Vertex schema breaks a structural rule the reverse converter needs."""
