"""privfs: a filesystem provider that performs every operation through a privileged shell session.

Subpackages are imported directly; keep __all__ empty.
"""

__all__: list[str] = []
