"""Gemini request fragments built from pydantic schemas."""

from typing import Any, Dict, Optional

from .to_vertex import to_vertex_schema


def function_declaration(name: str, source: Any, description: Optional[str] = None) -> Dict[str, Any]:
    """Build a Gemini ``FunctionDeclaration`` dict for a tool.

    The description defaults to the schema's own description (for models,
    the class docstring).
    """
    schema = to_vertex_schema(source)
    declaration = {
        "name": name,
        "description": description or schema.description or "",
        "parameters": schema.to_dict(),
    }
    return declaration


def response_config(source: Any, temperature: Optional[float] = None) -> Dict[str, Any]:
    """Build a ``generate_content`` config requesting schema-shaped JSON."""
    config = {
        "response_mime_type": "application/json",
        "response_schema": to_vertex_schema(source).to_dict(),
    }
    if temperature is not None:
        config["temperature"] = temperature
    return config
