"""
SDL type definition parsing.

Turns a raw schema-definition-language fragment into type descriptors:

    type Person implements Node {
      name: String
      friends(first: Int = 10): [Person!]
    }

Only named type definitions are accepted. Schema definitions, directive
definitions, type extensions and executable definitions are rejected with a
ParseFailureError pointing at the offending line.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from graphql import (
    EnumTypeDefinitionNode,
    FieldDefinitionNode,
    GraphQLSyntaxError,
    InputObjectTypeDefinitionNode,
    InputValueDefinitionNode,
    InterfaceTypeDefinitionNode,
    ObjectTypeDefinitionNode,
    ScalarTypeDefinitionNode,
    Source,
    UnionTypeDefinitionNode,
    parse,
    print_ast,
    value_from_ast_untyped,
)
from graphql.language import DefinitionNode, get_location
from graphql.pyutils import Undefined

from ..errors import ParseFailureError
from ..reporting import code_frame
from .types import (
    ArgumentDef,
    EnumTypeDef,
    FieldDef,
    InputObjectTypeDef,
    InterfaceTypeDef,
    ObjectTypeDef,
    ScalarTypeDef,
    TypeDef,
    UnionTypeDef,
)

PARSE_ERROR_HEADER = "Encountered an error parsing the provided GraphQL type definitions:"


def _description(node: Any) -> str:
    description = getattr(node, "description", None)
    return description.value if description is not None else ""


def _deprecation_reason(node: FieldDefinitionNode) -> Optional[str]:
    for directive in node.directives or ():
        if directive.name.value == "deprecated":
            for arg in directive.arguments or ():
                if arg.name.value == "reason":
                    return value_from_ast_untyped(arg.value)
            return "No longer supported"
    return None


def _default(node: InputValueDefinitionNode) -> Any:
    if node.default_value is None:
        return Undefined
    return value_from_ast_untyped(node.default_value)


def _arguments(nodes: Any) -> Dict[str, ArgumentDef]:
    return {
        arg.name.value: ArgumentDef(
            type=print_ast(arg.type),
            default=_default(arg),
            description=_description(arg),
        )
        for arg in nodes or ()
    }


def _fields(nodes: Any) -> Dict[str, FieldDef]:
    return {
        f.name.value: FieldDef(
            name=f.name.value,
            type=print_ast(f.type),
            args=_arguments(f.arguments),
            description=_description(f),
            deprecation_reason=_deprecation_reason(f),
        )
        for f in nodes or ()
    }


def _input_fields(nodes: Any) -> Dict[str, FieldDef]:
    return {
        f.name.value: FieldDef(
            name=f.name.value,
            type=print_ast(f.type),
            default=_default(f),
            description=_description(f),
        )
        for f in nodes or ()
    }


def _type_def(node: DefinitionNode) -> Optional[TypeDef]:
    if isinstance(node, ObjectTypeDefinitionNode):
        return ObjectTypeDef(
            name=node.name.value,
            fields=_fields(node.fields),
            interfaces=tuple(i.name.value for i in node.interfaces or ()),
            description=_description(node),
        )
    if isinstance(node, InterfaceTypeDefinitionNode):
        return InterfaceTypeDef(
            name=node.name.value,
            fields=_fields(node.fields),
            interfaces=tuple(i.name.value for i in node.interfaces or ()),
            description=_description(node),
        )
    if isinstance(node, UnionTypeDefinitionNode):
        return UnionTypeDef(
            name=node.name.value,
            types=tuple(t.name.value for t in node.types or ()),
            description=_description(node),
        )
    if isinstance(node, InputObjectTypeDefinitionNode):
        return InputObjectTypeDef(
            name=node.name.value,
            fields=_input_fields(node.fields),
            description=_description(node),
        )
    if isinstance(node, EnumTypeDefinitionNode):
        return EnumTypeDef(
            name=node.name.value,
            values={v.name.value: v.name.value for v in node.values or ()},
            description=_description(node),
        )
    if isinstance(node, ScalarTypeDefinitionNode):
        return ScalarTypeDef(name=node.name.value, description=_description(node))
    return None


def format_parse_error(
    message: str,
    body: str,
    line: int,
    column: int,
    lines_above: int = 5,
    lines_below: int = 5,
) -> ParseFailureError:
    """Build a ParseFailureError whose message includes a code frame."""
    frame = code_frame(body, line, column, lines_above, lines_below)
    return ParseFailureError(
        f"{PARSE_ERROR_HEADER}\n{message}\n\n{frame}\n",
        line=line,
        column=column,
        excerpt=frame,
    )


def parse_type_defs(
    sdl: str,
    lines_above: int = 5,
    lines_below: int = 5,
) -> List[TypeDef]:
    """Parse an SDL fragment into type descriptors.

    Args:
        sdl: Schema definition language text
        lines_above: Code frame context before an error line
        lines_below: Code frame context after an error line

    Returns:
        Descriptors in source order

    Raises:
        ParseFailureError: On syntax errors or unsupported definitions
        GraphQLSyntaxError: Unchanged when the parser gave no location
    """
    source = Source(sdl, "type definitions")
    try:
        document = parse(source)
    except GraphQLSyntaxError as e:
        if not e.locations:
            raise
        location = e.locations[0]
        raise format_parse_error(
            e.message, sdl, location.line, location.column, lines_above, lines_below
        ) from e

    type_defs = []
    for node in document.definitions:
        type_def = _type_def(node)
        if type_def is None:
            location = get_location(source, node.loc.start) if node.loc else None
            message = f"Illegal type definition: only named types are supported, got {node.kind}."
            if location is None:
                raise ParseFailureError(message)
            raise format_parse_error(
                message, sdl, location.line, location.column, lines_above, lines_below
            )
        type_defs.append(type_def)
    return type_defs
