"""Template file naming convention.

A template class name is split at its capital letters, joined with
underscores, lower-cased and suffixed with ``_template``:

    InvoiceTemplate -> invoice_template_template
    PkoTemplate     -> pko_template_template
    HTMLPage        -> h_t_m_l_page_template

The file extension is not part of the name. It is appended once, when the
template file is resolved on disk.
"""

import re

from docsmith.errors import InvalidInputError

TEMPLATE_SUFFIX = "_template"

# A capital followed by its non-capital tail, a lone capital inside a run of
# capitals, or a leading lower-case prefix.
_FRAGMENT_RE = re.compile(r"[A-Z]?[^A-Z]+|[A-Z]")


def split_fragments(identifier: str) -> list[str]:
    """Split an identifier at uppercase-letter boundaries.

    Examples:
        >>> split_fragments("InvoiceTemplate")
        ['Invoice', 'Template']
        >>> split_fragments("salesReceipt")
        ['sales', 'Receipt']
    """
    return _FRAGMENT_RE.findall(identifier)


def resolve_name(type_identifier: str, explicit_override: str | None = None) -> str:
    """Resolve the template file name for a type.

    Args:
        type_identifier: Class name of the template type
        explicit_override: Name to use verbatim instead of the derived one

    Returns:
        Template name without extension

    Raises:
        InvalidInputError: If neither a type identifier nor an override is given
    """
    if explicit_override:
        return explicit_override

    if not type_identifier:
        raise InvalidInputError("Cannot resolve a template name from an empty type identifier")

    return "_".join(split_fragments(type_identifier)).lower() + TEMPLATE_SUFFIX
