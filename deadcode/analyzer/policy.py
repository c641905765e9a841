"""Initial usage status of freshly declared names.

Some declarations are reachable without any reference inside the package:
``init`` functions, the program's ``main``, and exported names of a library
package. Only package-level declarations qualify; anything declared inside a
function starts unused regardless of its name.
"""

INIT_FUNC = "init"
MAIN_FUNC = "main"


def is_exported(name: str) -> bool:
    """Go export rule: the name starts with an upper-case letter."""
    return bool(name) and name[0].isupper()


def initially_used(name: str, root: bool, entry: bool) -> bool:
    """Decide whether a declaration starts out as used.

    Args:
        name: Declared name
        root: True when declared at package scope
        entry: True when the package builds an executable

    Returns:
        True if the symbol must never be reported
    """
    if not root:
        return False
    if name == INIT_FUNC:
        return True
    if name == MAIN_FUNC and entry:
        return True
    return is_exported(name) and not entry
