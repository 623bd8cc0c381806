"""
Puntada: position-addressed text edits for JSX/TSX source

Stamps every JSX element with the file, line and column of its opening tag
while a build pipeline transforms it, then writes text edited in a live
preview back into exactly that element of the source file, leaving every
other byte alone. Zero runtime dependencies.

Quick Start:
    >>> from puntada import stamp, apply_patch
    >>> result = stamp("/srv/app/src/App.tsx", source, project_root="/srv/app")
    >>> result.code          # markup now carries data-edit-id="src/App.tsx:3:5"
    >>> result.map           # Source Map v3 back to the original

    >>> # Later, when the user edits the rendered text:
    >>> apply_patch("src/App.tsx:3:5", "Hi", project_root="/srv/app")
    PatchResult(file_path='src/App.tsx', new_content='...')

Web Boundary:
    >>> from puntada import handle_edit_request
    >>> response = handle_edit_request(request_body, project_root="/srv/app")
    >>> response.status, response.body
"""

from puntada.cache import DictStampCache, StampCache, hash_config, hash_content
from puntada.config import (
    EngineConfig,
    engine_config_context,
    get_engine_config,
    reset_engine_config,
    set_engine_config,
)
from puntada.errors import (
    AccessDenied,
    InternalFailure,
    InvalidIdentifier,
    NotFound,
    NotMutable,
    ParseError,
    PatchError,
    PuntadaError,
    TargetNotFound,
)
from puntada.identifier import EditId, decode, encode
from puntada.location import POSITION_SCHEME, SourceLocation, source_position
from puntada.nodes import (
    Attribute,
    Child,
    Diagnostic,
    Document,
    Element,
    Expression,
    Fragment,
    Markup,
    Node,
    SpreadAttribute,
    Text,
)
from puntada.parser import Parser
from puntada.patch import FileLockRegistry, PatchResult, apply_patch
from puntada.printer import to_source
from puntada.relay import RelayResponse, handle_edit_request, status_report
from puntada.serialization import to_dict, to_json
from puntada.stamp import StampResult, StampStatus, stamp
from puntada.visitor import BaseVisitor, transform

__version__ = "0.1.0"


def parse(source: str, *, source_file: str | None = None) -> Document:
    """Parse JSX/TSX source into a typed markup tree.

    Uses the active EngineConfig (``strict`` decides whether malformed
    markup raises or is recorded as a diagnostic).

    Args:
        source: JavaScript/TypeScript source text
        source_file: Optional source file path for locations and errors

    Returns:
        Document root node

    Example:
        >>> doc = parse("const a = <p>Hello</p>;")
        >>> doc.children[0].name
        'p'
    """
    return Parser(source, source_file=source_file).parse()


__all__ = [
    "POSITION_SCHEME",
    "AccessDenied",
    "Attribute",
    "BaseVisitor",
    "Child",
    "Diagnostic",
    "DictStampCache",
    "Document",
    "EditId",
    "Element",
    "EngineConfig",
    "Expression",
    "FileLockRegistry",
    "Fragment",
    "InternalFailure",
    "InvalidIdentifier",
    "Markup",
    "Node",
    "NotFound",
    "NotMutable",
    "ParseError",
    "Parser",
    "PatchError",
    "PatchResult",
    "PuntadaError",
    "RelayResponse",
    "SourceLocation",
    "SpreadAttribute",
    "StampCache",
    "StampResult",
    "StampStatus",
    "TargetNotFound",
    "Text",
    "__version__",
    "apply_patch",
    "decode",
    "encode",
    "engine_config_context",
    "get_engine_config",
    "handle_edit_request",
    "hash_config",
    "hash_content",
    "parse",
    "reset_engine_config",
    "set_engine_config",
    "source_position",
    "stamp",
    "status_report",
    "to_dict",
    "to_json",
    "to_source",
    "transform",
]
