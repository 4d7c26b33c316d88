"""Name derivation between declared field identifiers and GraphQL/Python names."""

import re

# Applied in order, all occurrences, case-sensitive
_ACRONYMS = (
    ("ID", "Id"),
    ("URL", "Url"),
)


def field_name(identifier: str) -> str:
    """Derive the GraphQL field name from a declared identifier.

    Known acronyms are title-cased and the first character lower-cased:
    ``HumanID`` -> ``humanId``, ``PhotoURL`` -> ``photoUrl``.
    """
    name = identifier
    for acronym, replacement in _ACRONYMS:
        name = name.replace(acronym, replacement)
    if not name:
        return name
    return name[0].lower() + name[1:]


def field_selection(identifier: str, args: str | None = None) -> str:
    """Field name with its argument text attached verbatim, if any."""
    name = field_name(identifier)
    if args:
        name = f"{name}({args})"
    return name


def to_snake_case(name: str) -> str:
    """Convert camelCase/PascalCase to snake_case."""
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', name)
    return re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1).lower()
