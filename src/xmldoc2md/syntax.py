"""C#-style declaration lines reconstructed from manifest descriptors."""

from __future__ import annotations

from .models import MemberDescriptor, MemberKind, ParameterInfo, TypeInfo, TypeKind, TypeRef
from .signatures import short_type_name

_KEYWORD_ALIASES = {
    "System.Boolean": "bool",
    "System.Byte": "byte",
    "System.SByte": "sbyte",
    "System.Char": "char",
    "System.Decimal": "decimal",
    "System.Double": "double",
    "System.Single": "float",
    "System.Int16": "short",
    "System.Int32": "int",
    "System.Int64": "long",
    "System.UInt16": "ushort",
    "System.UInt32": "uint",
    "System.UInt64": "ulong",
    "System.Object": "object",
    "System.String": "string",
    "System.Void": "void",
}

OPERATOR_TOKENS = {
    "op_Addition": "+",
    "op_Subtraction": "-",
    "op_Multiply": "*",
    "op_Division": "/",
    "op_Modulus": "%",
    "op_Equality": "==",
    "op_Inequality": "!=",
    "op_LessThan": "<",
    "op_GreaterThan": ">",
    "op_LessThanOrEqual": "<=",
    "op_GreaterThanOrEqual": ">=",
    "op_UnaryNegation": "-",
    "op_UnaryPlus": "+",
    "op_LogicalNot": "!",
    "op_OnesComplement": "~",
    "op_Increment": "++",
    "op_Decrement": "--",
    "op_True": "true",
    "op_False": "false",
    "op_BitwiseAnd": "&",
    "op_BitwiseOr": "|",
    "op_ExclusiveOr": "^",
    "op_LeftShift": "<<",
    "op_RightShift": ">>",
}

_CONVERSION_KEYWORDS = {"op_Implicit": "implicit", "op_Explicit": "explicit"}

# Base types implied by the declaration keyword.
_IMPLICIT_BASE_TYPES = {"System.Object", "System.ValueType", "System.Enum"}


def csharp_type_name(type_ref: TypeRef) -> str:
    if type_ref.is_generic_parameter:
        name = type_ref.full_name
    elif type_ref.generic_arguments:
        arguments = ", ".join(csharp_type_name(arg) for arg in type_ref.generic_arguments)
        name = f"{short_type_name(type_ref.full_name).replace('+', '.')}<{arguments}>"
    else:
        name = _KEYWORD_ALIASES.get(
            type_ref.full_name, short_type_name(type_ref.full_name).replace("+", ".")
        )

    if type_ref.array_rank:
        name = f"{name}[{',' * (type_ref.array_rank - 1)}]"
    if type_ref.is_pointer:
        name = f"{name}*"
    return name


def type_declaration(type_info: TypeInfo) -> str:
    name = type_info.name
    if type_info.generic_parameters:
        name = f"{name}<{', '.join(type_info.generic_parameters)}>"

    words = [str(type_info.visibility), *type_info.modifiers, str(type_info.kind), name]
    declaration = " ".join(words)

    bases: list[str] = []
    if type_info.base_type is not None and type_info.base_type.full_name not in _IMPLICIT_BASE_TYPES:
        bases.append(csharp_type_name(type_info.base_type))
    if type_info.kind != TypeKind.ENUM:
        bases.extend(csharp_type_name(interface) for interface in type_info.interfaces)
    if bases:
        declaration = f"{declaration} : {', '.join(bases)}"
    return declaration


def member_declaration(member: MemberDescriptor) -> str:
    prefix = " ".join([str(member.visibility), *member.modifiers])
    member_type = csharp_type_name(member.return_type) if member.return_type else "void"

    if member.kind == MemberKind.CONSTRUCTOR:
        return f"{prefix} {member.declaring_type.name}({_parameter_list(member.parameters)})"

    if member.kind == MemberKind.METHOD:
        parameters = _parameter_list(member.parameters)
        if member.name in _CONVERSION_KEYWORDS:
            keyword = _CONVERSION_KEYWORDS[member.name]
            return f"{_with_static(prefix)} {keyword} operator {member_type}({parameters})"
        if member.name in OPERATOR_TOKENS:
            token = OPERATOR_TOKENS[member.name]
            return f"{_with_static(prefix)} {member_type} operator {token}({parameters})"
        name = member.name
        if member.generic_parameters:
            name = f"{name}<{', '.join(member.generic_parameters)}>"
        return f"{prefix} {member_type} {name}({parameters})"

    if member.kind == MemberKind.PROPERTY:
        accessors = " ".join(f"{accessor};" for accessor in (member.accessors or ("get",)))
        if member.parameters:
            return (
                f"{prefix} {member_type} this[{_parameter_list(member.parameters)}] "
                f"{{ {accessors} }}"
            )
        return f"{prefix} {member_type} {member.name} {{ {accessors} }}"

    if member.kind == MemberKind.EVENT:
        return f"{prefix} event {member_type} {member.name};"

    declaration = f"{prefix} {member_type} {member.name}"
    if member.value is not None and "const" in member.modifiers:
        declaration = f"{declaration} = {member.value}"
    return f"{declaration};"


def _parameter_list(parameters: tuple[ParameterInfo, ...]) -> str:
    rendered: list[str] = []
    for parameter in parameters:
        prefix = "ref " if parameter.type.is_by_ref else ""
        rendered.append(f"{prefix}{csharp_type_name(parameter.type)} {parameter.name}")
    return ", ".join(rendered)


def _with_static(prefix: str) -> str:
    return prefix if "static" in prefix.split() else f"{prefix} static"
